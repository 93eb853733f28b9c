"""Tests for the filter and record models."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from response_filtering.model import FormResponse, ResponseFilter, ResponsePage
from response_filtering.operators import FilterOperator, resolve_logic, resolve_operator


class TestResponseFilter:
    """``ResponseFilter`` accepts the camelCase API shape leniently."""

    def test_camel_case_payload(self) -> None:
        f = ResponseFilter.model_validate(
            {"fieldId": "color", "operator": "CONTAINS", "value": "Red"}
        )
        assert f.field_id == "color"
        assert f.resolved_operator is FilterOperator.CONTAINS
        assert f.value == "Red"

    def test_snake_case_and_enum_operator(self) -> None:
        f = ResponseFilter(
            field_id="age", operator=FilterOperator.GREATER_THAN, value=5
        )
        assert f.operator == "GREATER_THAN"
        assert f.value == "5"

    def test_operator_resolution_is_case_insensitive(self) -> None:
        assert ResponseFilter(field_id="x", operator="equals").resolved_operator is (
            FilterOperator.EQUALS
        )

    def test_unknown_operator_is_kept_but_unresolved(self) -> None:
        f = ResponseFilter(field_id="x", operator="REGEX")
        assert f.operator == "REGEX"
        assert f.resolved_operator is None

    def test_values_are_normalized_to_strings(self) -> None:
        f = ResponseFilter(field_id="x", operator="IN", values=["a", 1, True, None])
        assert f.values == ("a", "1", "true")

    def test_single_string_values(self) -> None:
        assert ResponseFilter(field_id="x", operator="IN", values="a").values == ("a",)

    def test_single_non_iterable_values(self) -> None:
        f = ResponseFilter(field_id="x", operator="IN", values=5)
        assert f.values == ("5",)
        assert ResponseFilter(field_id="x", operator="IN", values=True).values == (
            "true",
        )

    def test_number_range_is_lenient(self) -> None:
        f = ResponseFilter.model_validate(
            {
                "fieldId": "age",
                "operator": "BETWEEN",
                "numberRange": {"min": "", "max": "10"},
            }
        )
        assert f.number_range is not None
        assert f.number_range.min is None
        assert f.number_range.max == 10.0
        assert not f.number_range.is_empty

    def test_number_range_garbage_is_empty(self) -> None:
        f = ResponseFilter.model_validate(
            {
                "fieldId": "age",
                "operator": "BETWEEN",
                "numberRange": {"min": "abc", "max": "nan"},
            }
        )
        assert f.number_range is not None
        assert f.number_range.is_empty

    def test_date_range_alias(self) -> None:
        f = ResponseFilter.model_validate(
            {
                "fieldId": "joined",
                "operator": "DATE_BETWEEN",
                "dateRange": {"from": "2024-01-01", "to": ""},
            }
        )
        assert f.date_range is not None
        assert f.date_range.from_ == "2024-01-01"
        assert f.date_range.to is None

    def test_filters_are_immutable(self) -> None:
        f = ResponseFilter(field_id="x", operator="EQUALS", value="a")
        with pytest.raises(ValidationError):
            f.value = "b"  # type: ignore[misc]


def test_resolve_helpers() -> None:
    assert resolve_operator("date_equals") is FilterOperator.DATE_EQUALS
    assert resolve_operator(None) is None
    assert resolve_logic("or").value == "OR"
    assert resolve_logic("xor").value == "AND"
    assert resolve_logic(None).value == "AND"


class TestFormResponse:
    """Record normalization from both storage backends."""

    def test_from_document_maps_id_and_dates(self) -> None:
        record = FormResponse.from_document(
            {
                "_id": "abc",
                "formId": "f",
                "data": {"color": "Red"},
                "submittedAt": datetime(2024, 1, 1, 12, 0),
            }
        )
        assert record.id == "abc"
        assert record.form_id == "f"
        assert record.field_value("color") == "Red"
        assert record.field_value("missing") is None
        assert record.submitted_at == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "raw",
        [
            {"$date": "2024-01-01T00:00:00Z"},
            {"$date": {"$numberLong": "1704067200000"}},
            "2024-01-01T00:00:00Z",
            1704067200000,
        ],
    )
    def test_from_document_submitted_at_shapes(self, raw) -> None:
        record = FormResponse.from_document(
            {"_id": 1, "formId": "f", "submittedAt": raw}
        )
        assert record.submitted_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert record.id == "1"

    def test_from_document_without_date_uses_now(self) -> None:
        before = datetime.now(timezone.utc)
        record = FormResponse.from_document({"_id": "x", "formId": "f"})
        assert record.submitted_at >= before
        assert record.data == {}

    def test_from_row_decodes_json_text(self) -> None:
        record = FormResponse.from_row(
            {
                "id": "r1",
                "formId": "f",
                "data": json.dumps({"tags": ["a"]}),
                "metadata": json.dumps({"ip": "127.0.0.1"}),
                "submittedAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
            }
        )
        assert record.data == {"tags": ["a"]}
        assert record.metadata == {"ip": "127.0.0.1"}

    def test_non_object_data_becomes_empty(self) -> None:
        record = FormResponse.from_row(
            {
                "id": "r1",
                "formId": "f",
                "data": "[1, 2]",
                "submittedAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
            }
        )
        assert record.data == {}

    def test_document_metadata_text_is_not_decoded(self) -> None:
        submitted = datetime(2024, 1, 1, tzinfo=timezone.utc)
        for text in ("web", "true", "12"):
            record = FormResponse.from_document(
                {"_id": "r1", "formId": "f", "metadata": text, "submittedAt": submitted}
            )
            assert record.metadata == text

    def test_row_text_that_is_not_json_is_kept(self) -> None:
        record = FormResponse.from_row(
            {
                "id": "r1",
                "formId": "f",
                "data": "{broken",
                "metadata": "web",
                "submittedAt": datetime(2024, 1, 1, tzinfo=timezone.utc),
            }
        )
        assert record.metadata == "web"
        assert record.data == {}


class TestResponsePage:
    def test_total_pages_rounds_up(self) -> None:
        assert ResponsePage(total=21, limit=10).total_pages == 3
        assert ResponsePage(total=20, limit=10).total_pages == 2
        assert ResponsePage(total=0, limit=10).total_pages == 0

    def test_to_dict_uses_api_names(self) -> None:
        record = FormResponse(
            id="r1",
            form_id="f",
            data={"a": 1},
            submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        payload = ResponsePage(data=[record], total=1, page=1, limit=10).to_dict()
        assert payload["totalPages"] == 1
        assert payload["total"] == 1
        assert payload["data"][0]["formId"] == "f"
        assert "submittedAt" in payload["data"][0]
