"""
Compile response filters into parameterized PostgreSQL fragments.

Uses the strategy pattern: each operator is an isolated class in
``operators/``, registered in a ``SQLOperatorRegistry``.  The compiler
sanitizes every field id up front and delegates each filter to the
registry.

Parameters are positional (``$n``).  ``$1`` is always the form id, so the
fragments can be appended to ``WHERE "formId" = $1``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NamedTuple

from ..accessors import JsonbFieldAccessor
from ..operators import FilterLogic, resolve_logic
from ..sanitizer import ensure_safe_field_id
from .operators import DEFAULT_SQL_REGISTRY
from .params import ParamHelper

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..model import ResponseFilter
    from .strategy import SQLOperatorRegistry

logger = logging.getLogger(__name__)


class RawSQLFilter(NamedTuple):
    """Compiled conditions plus the full positional parameter list."""

    conditions: list[str]
    params: list[Any]

    def where(self, logic: FilterLogic | str = FilterLogic.AND) -> str | None:
        return join_conditions(self.conditions, logic)


def join_conditions(
    conditions: Sequence[str],
    logic: FilterLogic | str = FilterLogic.AND,
) -> str | None:
    """Join *conditions* with ``AND``/``OR``; ``None`` when there are none."""
    if not conditions:
        return None
    joiner = f" {resolve_logic(logic).value} "
    return joiner.join(conditions)


class RelationalFilterCompiler:
    """Turns ``ResponseFilter`` lists into SQL over a JSONB column."""

    def __init__(
        self,
        *,
        json_column: str = "data",
        registry: SQLOperatorRegistry | None = None,
    ) -> None:
        self._json_column = json_column
        self._registry = registry or DEFAULT_SQL_REGISTRY

    def compile_filter(self, f: ResponseFilter, params: ParamHelper) -> str | None:
        """Compile one filter; ``None`` means "no condition"."""
        field = JsonbFieldAccessor(f.field_id, self._json_column)
        op = f.resolved_operator
        if op is None:
            logger.warning(
                "Unsupported filter operator %r on field %s; skipping",
                f.operator,
                f.field_id,
            )
            return None
        strategy = self._registry.get(op)
        if strategy is None:
            logger.warning("No SQL operator registered for %s", op.value)
            return None
        return strategy.build(field, f, params)

    def compile(
        self,
        form_id: str,
        filters: Iterable[ResponseFilter] | None = None,
        start_param_index: int = 2,
    ) -> RawSQLFilter:
        """
        Compile *filters* for *form_id*.

        Raises:
            UnsafeFieldIdError: If any filter names an unsafe field id.
                Raised before any SQL is produced.
        """
        items = list(filters or ())
        for f in items:
            ensure_safe_field_id(f.field_id)

        params = ParamHelper([form_id], start_index=start_param_index)
        conditions = [
            sql
            for sql in (self.compile_filter(f, params) for f in items)
            if sql is not None
        ]
        logger.debug(
            "Compiled %d SQL condition(s) from %d filter(s)",
            len(conditions),
            len(items),
        )
        return RawSQLFilter(conditions, params.params)


def build_postgresql_filter(
    form_id: str,
    filters: Iterable[ResponseFilter] | None = None,
    filter_logic: FilterLogic | str = FilterLogic.AND,
) -> tuple[str | None, list[Any]]:
    """
    Compile *filters* with the default compiler.

    Returns:
        ``(where_fragment, params)``; the fragment is ``None`` when no
        filter produced a condition.  ``params[0]`` is the form id.
    """
    raw = RelationalFilterCompiler().compile(form_id, filters)
    return raw.where(filter_logic), raw.params
