"""
Response listing orchestration.

``ResponseListingService`` resolves paging/sorting, decides where each
filter is evaluated and assembles a ``ResponsePage``:

* relational stores evaluate every filter in SQL;
* document stores evaluate in the database when they can express the
  whole request, otherwise the pushable filters narrow the candidate set
  and the rest is evaluated, sorted and paginated in memory.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .capabilities import Backend, partition_filters, resolve_backend
from .document import DocumentQueryBuilder
from .listing import ListingOptions, paginate, resolve_listing_options, sort_responses
from .memory import apply_response_filters
from .model import FormResponse, ResponseFilter, ResponsePage
from .operators import FilterLogic, resolve_logic
from .relational import RelationalStatementBuilder
from .sanitizer import ensure_safe_field_id
from .settings import DEFAULT_SETTINGS, ListingSettings

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .memory import MemoryOperatorRegistry
    from .storage import DocumentResponseStore, RelationalResponseStore

    MemoryFilter = Callable[..., list[FormResponse]]

logger = logging.getLogger(__name__)


class ListResponsesQuery(BaseModel):
    """
    Immutable request for one page of a form's responses.

    ``page`` and ``limit`` are taken as supplied by the API layer; they are
    clamped (never rejected) when the query is handled.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    query_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    form_id: str = Field(alias="formId")
    page: Any = 1
    limit: Any = None
    sort_by: str | None = Field(default=None, alias="sortBy")
    sort_order: str | None = Field(default=None, alias="sortOrder")
    filters: tuple[ResponseFilter, ...] = ()
    filter_logic: FilterLogic = Field(default=FilterLogic.AND, alias="filterLogic")

    @field_validator("filter_logic", mode="before")
    @classmethod
    def _lenient_logic(cls, value: Any) -> FilterLogic:
        return resolve_logic(value)

    @field_validator("filters", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return () if value is None else value


class ResponseListingService:
    """
    Lists form responses from either storage backend.

    Args:
        store: A ``DocumentResponseStore`` or ``RelationalResponseStore``
            matching *backend*.
        backend: ``"document"`` or ``"relational"``.
        settings: Paging defaults, sortable keys and storage naming.
        apply_filters: In-memory filter function used on the hybrid path.
        registry: Memory operator registry passed to *apply_filters*.
    """

    def __init__(
        self,
        store: DocumentResponseStore | RelationalResponseStore,
        backend: Backend | str = Backend.DOCUMENT,
        settings: ListingSettings = DEFAULT_SETTINGS,
        apply_filters: MemoryFilter = apply_response_filters,
        registry: MemoryOperatorRegistry | None = None,
    ) -> None:
        self.store = store
        self.backend = resolve_backend(backend)
        self.settings = settings
        self._apply_filters = apply_filters
        self._registry = registry
        self._documents = DocumentQueryBuilder(
            data_field=settings.data_field, form_field=settings.form_field
        )
        self._statements = RelationalStatementBuilder(settings)

    async def handle(self, query: ListResponsesQuery) -> ResponsePage:
        return await self.list_responses(
            query.form_id,
            page=query.page,
            limit=query.limit,
            sort_by=query.sort_by,
            sort_order=query.sort_order,
            filters=query.filters,
            filter_logic=query.filter_logic,
        )

    async def list_responses(
        self,
        form_id: str,
        *,
        page: Any = 1,
        limit: Any = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        filters: Sequence[ResponseFilter] | None = None,
        filter_logic: FilterLogic | str = FilterLogic.AND,
    ) -> ResponsePage:
        """
        Return one page of responses for *form_id*.

        Raises:
            UnsafeFieldIdError: If any filter names an unsafe field id.
        """
        options = resolve_listing_options(
            page, limit, sort_by, sort_order, self.settings
        )
        items = self._checked(filters)
        logic = resolve_logic(filter_logic)

        if self.backend is Backend.RELATIONAL:
            return await self._list_relational(form_id, items, options, logic)
        return await self._list_documents(form_id, items, options, logic)

    async def list_all(
        self,
        form_id: str,
        filters: Sequence[ResponseFilter] | None = None,
        filter_logic: FilterLogic | str = FilterLogic.AND,
    ) -> list[FormResponse]:
        """Every matching response, newest first (export consumers)."""
        items = self._checked(filters)
        logic = resolve_logic(filter_logic)

        if self.backend is Backend.RELATIONAL:
            sql, params = self._statements.build_unpaged(form_id, items, logic)
            return await self._relational.fetch_all(sql, params)

        pushed, remaining = self._split_document_filters(items, logic)
        match = self._documents.build_match(form_id, pushed)
        records = await self._document.find(match, [("submittedAt", -1)])
        if remaining:
            records = self._memory_filter(records, remaining, logic)
        return records

    # -- helpers -------------------------------------------------------------

    @property
    def _document(self) -> DocumentResponseStore:
        return self.store  # type: ignore[return-value]

    @property
    def _relational(self) -> RelationalResponseStore:
        return self.store  # type: ignore[return-value]

    @staticmethod
    def _checked(filters: Sequence[ResponseFilter] | None) -> list[ResponseFilter]:
        items = list(filters or ())
        for f in items:
            ensure_safe_field_id(f.field_id)
        return items

    @staticmethod
    def _split_document_filters(
        filters: list[ResponseFilter],
        logic: FilterLogic,
    ) -> tuple[list[ResponseFilter], list[ResponseFilter]]:
        # Only a conjunction can be narrowed by a partial pushdown.
        if logic is FilterLogic.OR and len(filters) > 1:
            return [], filters
        partition = partition_filters(filters, Backend.DOCUMENT)
        return partition.pushable, partition.memory_only

    def _memory_filter(
        self,
        records: list[FormResponse],
        filters: list[ResponseFilter],
        logic: FilterLogic,
    ) -> list[FormResponse]:
        return self._apply_filters(records, filters, logic, registry=self._registry)

    async def _list_relational(
        self,
        form_id: str,
        filters: list[ResponseFilter],
        options: ListingOptions,
        logic: FilterLogic,
    ) -> ResponsePage:
        query = self._statements.build(form_id, filters, options, logic)
        logger.info(
            "Listing responses for form %s at database level "
            "(relational, %d filter(s))",
            form_id,
            len(filters),
        )
        records, total = await asyncio.gather(
            self._relational.fetch_all(query.select_sql, query.select_params),
            self._relational.fetch_value(query.count_sql, query.count_params),
        )
        return ResponsePage(
            data=records, total=int(total or 0), page=options.page, limit=options.limit
        )

    async def _list_documents(
        self,
        form_id: str,
        filters: list[ResponseFilter],
        options: ListingOptions,
        logic: FilterLogic,
    ) -> ResponsePage:
        pushed, remaining = self._split_document_filters(filters, logic)

        if not remaining and not options.is_dynamic:
            match = self._documents.build_match(form_id, pushed)
            logger.info(
                "Listing responses for form %s at database level "
                "(document, %d filter(s))",
                form_id,
                len(pushed),
            )
            records, total = await asyncio.gather(
                self._document.find(
                    match,
                    self._documents.build_sort(options),
                    options.skip,
                    options.limit,
                ),
                self._document.count(match),
            )
            return ResponsePage(
                data=records, total=total, page=options.page, limit=options.limit
            )

        # Hybrid: narrow in the database, finish in memory.
        match = self._documents.build_match(form_id, pushed)
        logger.info(
            "Listing responses for form %s in memory "
            "(%d pushed, %d memory-only filter(s), dynamic sort: %s)",
            form_id,
            len(pushed),
            len(remaining),
            options.is_dynamic,
        )
        candidates = await self._document.find(match)
        matched = (
            self._memory_filter(candidates, remaining, logic)
            if remaining
            else candidates
        )
        ordered = sort_responses(matched, options)
        return ResponsePage(
            data=paginate(ordered, options),
            total=len(ordered),
            page=options.page,
            limit=options.limit,
        )
