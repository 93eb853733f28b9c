"""Tests for ResponseListingService across both storage backends."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from response_filtering.exceptions import UnsafeFieldIdError, UnsupportedBackendError
from response_filtering.model import ResponseFilter
from response_filtering.operators import FilterLogic
from response_filtering.service import ListResponsesQuery, ResponseListingService
from response_filtering.settings import ListingSettings
from response_filtering.storage import MotorResponseStore, SQLAlchemyResponseStore


def _filter(operator: str, field_id: str, **operands) -> ResponseFilter:
    return ResponseFilter(field_id=field_id, operator=operator, **operands)


def _ids(page) -> list[str]:
    return [r.id for r in page.data]


@pytest.fixture
def service(async_collection) -> ResponseListingService:
    return ResponseListingService(MotorResponseStore(async_collection))


# ---------------------------------------------------------------------------
# Document backend
# ---------------------------------------------------------------------------


class TestDocumentDatabasePath:
    @pytest.mark.asyncio
    async def test_default_listing(self, service, async_collection, form_id) -> None:
        page = await service.list_responses(form_id, limit=2)

        assert _ids(page) == ["r4", "r3"]
        assert page.total == 4
        assert page.total_pages == 2
        assert page.to_dict()["totalPages"] == 2
        assert async_collection.queries[-1] == {"formId": form_id}

    @pytest.mark.asyncio
    async def test_second_page(self, service, form_id) -> None:
        page = await service.list_responses(form_id, page=2, limit=3)
        assert _ids(page) == ["r1"]
        assert page.page == 2

    @pytest.mark.asyncio
    async def test_pushed_filters(self, service, async_collection, form_id) -> None:
        page = await service.list_responses(
            form_id,
            filters=[_filter("CONTAINS", "color", value="red")],
            sort_by="id",
            sort_order="asc",
        )
        assert _ids(page) == ["r1", "r2", "r4"]
        assert page.total == 3
        assert len(async_collection.queries[-1]["$and"]) == 1

    @pytest.mark.asyncio
    async def test_parameters_are_clamped(self, service, form_id) -> None:
        page = await service.list_responses(form_id, page=0, limit=1000)
        assert page.page == 1
        assert page.limit == 100

        page = await service.list_responses(form_id, page="x", limit=-1)
        assert page.page == 1
        assert page.limit == 1
        assert _ids(page) == ["r4"]

    @pytest.mark.asyncio
    async def test_invalid_sort_falls_back(self, service, form_id) -> None:
        page = await service.list_responses(
            form_id, sort_by="data.bad field", sort_order="sideways"
        )
        assert _ids(page) == ["r4", "r3", "r2", "r1"]

    @pytest.mark.asyncio
    async def test_page_beyond_end(self, service, form_id) -> None:
        page = await service.list_responses(form_id, page=5, limit=10)
        assert page.data == []
        assert page.total == 4

    @pytest.mark.asyncio
    async def test_logs_chosen_path(self, service, form_id, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="response_filtering.service"):
            await service.list_responses(form_id)
        assert "at database level" in caplog.text


class TestDocumentHybridPath:
    @pytest.mark.asyncio
    async def test_date_filter_runs_in_memory(
        self, service, async_collection, form_id, caplog
    ) -> None:
        with caplog.at_level(logging.INFO, logger="response_filtering.service"):
            page = await service.list_responses(
                form_id,
                filters=[
                    _filter("CONTAINS", "color", value="red"),
                    _filter("DATE_EQUALS", "joined", value="2024-01-15"),
                ],
            )

        assert _ids(page) == ["r1"]
        assert page.total == 1
        # only the pushable filter reaches the store
        assert len(async_collection.queries[-1]["$and"]) == 1
        assert "in memory" in caplog.text

    @pytest.mark.asyncio
    async def test_date_only_filter_totals_after_filtering(
        self, service, form_id
    ) -> None:
        page = await service.list_responses(
            form_id,
            limit=1,
            filters=[_filter("DATE_EQUALS", "joined", value="2024-01-15")],
        )
        assert _ids(page) == ["r3"]
        assert page.total == 2
        assert page.total_pages == 2

    @pytest.mark.asyncio
    async def test_or_logic_is_not_pushed(
        self, service, async_collection, form_id
    ) -> None:
        page = await service.list_responses(
            form_id,
            filters=[
                _filter("EQUALS", "color", value="blue"),
                _filter("LESS_THAN", "age", value="10"),
            ],
            filter_logic="OR",
        )
        assert _ids(page) == ["r4", "r3"]
        assert page.total == 2
        assert async_collection.queries[-1] == {"formId": form_id}

    @pytest.mark.asyncio
    async def test_single_filter_under_or_is_pushed(
        self, service, async_collection, form_id
    ) -> None:
        page = await service.list_responses(
            form_id,
            filters=[_filter("EQUALS", "color", value="blue")],
            filter_logic=FilterLogic.OR,
        )
        assert _ids(page) == ["r3"]
        assert "$and" in async_collection.queries[-1]

    @pytest.mark.parametrize(
        ("order", "expected"),
        [("asc", ["r4", "r1", "r2", "r3"]), ("desc", ["r3", "r2", "r1", "r4"])],
    )
    @pytest.mark.asyncio
    async def test_dynamic_sort(self, service, form_id, order, expected) -> None:
        page = await service.list_responses(
            form_id, sort_by="data.name", sort_order=order
        )
        assert _ids(page) == expected
        assert page.total == 4

    @pytest.mark.asyncio
    async def test_dynamic_sort_paginates_after_sorting(
        self, service, form_id
    ) -> None:
        page = await service.list_responses(
            form_id, sort_by="data.name", sort_order="asc", page=2, limit=3
        )
        assert _ids(page) == ["r3"]

    @pytest.mark.asyncio
    async def test_custom_memory_filter_is_used(
        self, async_collection, form_id
    ) -> None:
        calls = []

        def spy(records, filters, logic, registry=None):
            calls.append((len(records), len(filters), logic))
            return records[:1]

        service = ResponseListingService(
            MotorResponseStore(async_collection), apply_filters=spy
        )
        page = await service.list_responses(
            form_id, filters=[_filter("DATE_AFTER", "joined", value="2000-01-01")]
        )

        assert calls == [(4, 1, FilterLogic.AND)]
        assert page.total == 1


class TestErrors:
    @pytest.mark.asyncio
    async def test_unsafe_field_id_fails_before_io(
        self, service, async_collection, form_id
    ) -> None:
        with pytest.raises(UnsafeFieldIdError):
            await service.list_responses(
                form_id, filters=[_filter("EQUALS", "bad'id", value="x")]
            )
        assert async_collection.queries == []

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self, form_id) -> None:
        store = AsyncMock()
        store.find.side_effect = RuntimeError("connection reset")
        store.count.return_value = 0
        service = ResponseListingService(store)

        with pytest.raises(RuntimeError, match="connection reset"):
            await service.list_responses(form_id)

    def test_unknown_backend(self, async_collection) -> None:
        with pytest.raises(UnsupportedBackendError):
            ResponseListingService(MotorResponseStore(async_collection), "graph")


# ---------------------------------------------------------------------------
# Relational backend
# ---------------------------------------------------------------------------

ROWS = [
    {
        "id": "r9",
        "formId": "form-1",
        "data": '{"color": "red"}',
        "metadata": None,
        "submittedAt": datetime(2024, 3, 9, tzinfo=timezone.utc),
    }
]


class TestRelationalBackend:
    @pytest.mark.asyncio
    async def test_page_from_select_and_count(self, make_engine, form_id) -> None:
        engine = make_engine(rows=ROWS, count=11)
        service = ResponseListingService(
            SQLAlchemyResponseStore(engine), backend="relational"
        )

        page = await service.list_responses(
            form_id,
            page=2,
            limit=5,
            filters=[_filter("DATE_EQUALS", "joined", value="2024-01-15")],
        )

        assert _ids(page) == ["r9"]
        assert page.total == 11
        assert page.total_pages == 3
        statements = dict(engine.executed)
        select = next(sql for sql in statements if sql.startswith("SELECT id"))
        count = next(sql for sql in statements if sql.startswith("SELECT COUNT"))
        assert "LIMIT $3 OFFSET $4" in select
        assert statements[select][-2:] == (5, 5)
        assert len(statements[count]) == 2

    @pytest.mark.asyncio
    async def test_handle_query(self, make_engine) -> None:
        engine = make_engine(rows=ROWS, count=1)
        service = ResponseListingService(
            SQLAlchemyResponseStore(engine), backend="relational"
        )
        query = ListResponsesQuery.model_validate(
            {
                "formId": "form-1",
                "limit": "20",
                "sortBy": "data.color",
                "sortOrder": "asc",
                "filters": [
                    {"fieldId": "color", "operator": "EQUALS", "value": "Red"},
                    {"fieldId": "size", "operator": "IS_EMPTY"},
                ],
                "filterLogic": "or",
            }
        )

        page = await service.handle(query)

        assert page.limit == 20
        select, params = next(
            (sql, params) for sql, params in engine.executed if "LIMIT" in sql
        )
        assert " OR " in select
        assert "ORDER BY (data->>'color' IS NOT NULL) ASC" in select
        assert params == ("form-1", "red", 20, 0)

    @pytest.mark.asyncio
    async def test_custom_settings(self, make_engine) -> None:
        engine = make_engine()
        settings = ListingSettings(table="answers", form_column="form_id")
        service = ResponseListingService(
            SQLAlchemyResponseStore(engine), "relational", settings=settings
        )

        page = await service.list_responses("f")

        assert page.total == 0
        assert all(
            " FROM answers WHERE form_id = $1" in sql for sql, _ in engine.executed
        )

    @pytest.mark.asyncio
    async def test_list_all(self, make_engine) -> None:
        engine = make_engine(rows=ROWS)
        service = ResponseListingService(
            SQLAlchemyResponseStore(engine), backend="relational"
        )

        records = await service.list_all(
            "form-1", [_filter("GREATER_THAN", "age", value="1")]
        )

        assert [r.id for r in records] == ["r9"]
        ((sql, params),) = engine.executed
        assert sql.endswith('ORDER BY "submittedAt" DESC')
        assert len(params) == 2


# ---------------------------------------------------------------------------
# Export listing on the document backend
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_document_list_all(service, form_id) -> None:
    everything = await service.list_all(form_id)
    dated = await service.list_all(
        form_id, [_filter("DATE_BEFORE", "joined", value="2024-02-01")]
    )

    assert [r.id for r in everything] == ["r4", "r3", "r2", "r1"]
    assert [r.id for r in dated] == ["r3", "r1"]


def test_query_is_lenient() -> None:
    query = ListResponsesQuery(formId="f", filters=None, filterLogic="xor")
    assert query.filters == ()
    assert query.filter_logic is FilterLogic.AND
    assert query.query_id
