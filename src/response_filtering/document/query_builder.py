"""Mongo query builder for response filters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..accessors import DocumentFieldAccessor
from ..operators import DATE_OPERATORS
from .operators import DEFAULT_COMPILERS

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from ..listing import ListingOptions
    from ..model import ResponseFilter
    from ..operators import FilterOperator

    LeafCompiler = Callable[[str, ResponseFilter], dict[str, Any] | None]

logger = logging.getLogger(__name__)


class DocumentQueryBuilder:
    """
    Compiles a flat list of ``ResponseFilter`` into a MongoDB filter document.

    The result always anchors on the form id; predicates are combined
    under one top-level ``$and``.  There is no ``OR`` between user filters
    at this layer: callers that need ``OR`` evaluate in memory instead.
    """

    def __init__(
        self,
        *,
        data_field: str = "data",
        form_field: str = "formId",
        compilers: Mapping[FilterOperator, LeafCompiler] | None = None,
    ) -> None:
        self._data_field = data_field
        self._form_field = form_field
        self._compilers = dict(compilers or DEFAULT_COMPILERS)

    def compile_filter(self, f: ResponseFilter) -> dict[str, Any] | None:
        """Compile one filter; ``None`` means "no condition"."""
        path = DocumentFieldAccessor(f.field_id, self._data_field).path
        op = f.resolved_operator
        if op is None:
            logger.warning(
                "Unsupported filter operator %r on field %s; skipping",
                f.operator,
                f.field_id,
            )
            return None
        compiler = self._compilers.get(op)
        if compiler is None:
            if op in DATE_OPERATORS:
                logger.warning(
                    "%s cannot be evaluated by the document store; skipping",
                    op.value,
                )
            else:
                logger.warning("No document compiler registered for %s", op.value)
            return None
        return compiler(path, f)

    def build_match(
        self,
        form_id: str,
        filters: Iterable[ResponseFilter] | None = None,
    ) -> dict[str, Any]:
        """Build the ``find``/``$match`` filter for one form."""
        query: dict[str, Any] = {self._form_field: form_id}
        conditions = [
            compiled
            for compiled in (self.compile_filter(f) for f in filters or ())
            if compiled is not None
        ]
        if conditions:
            query["$and"] = conditions
        logger.debug("Compiled document query: %s", query)
        return query

    def build_sort(self, options: ListingOptions) -> list[tuple[str, int]]:
        """Build ``[(field, 1|-1)]`` sort tuples for a listing request."""
        direction = -1 if options.descending else 1
        if options.dynamic_field is not None:
            field = DocumentFieldAccessor(options.dynamic_field, self._data_field).path
        else:
            field = "_id" if options.sort_by == "id" else options.sort_by
        return [(field, direction)]


def build_mongodb_filter(
    form_id: str,
    filters: Iterable[ResponseFilter] | None = None,
) -> dict[str, Any]:
    """Compile *filters* for *form_id* with the default builder."""
    return DocumentQueryBuilder().build_match(form_id, filters)
