"""Full ``SELECT`` / ``COUNT(*)`` statements for response listings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, NamedTuple

from ..accessors import JsonbFieldAccessor
from ..coercion import NUMERIC_SQL_PATTERN
from ..operators import FilterLogic
from ..settings import DEFAULT_SETTINGS, ListingSettings, quote_identifier
from .compiler import RelationalFilterCompiler

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..listing import ListingOptions
    from ..model import ResponseFilter
    from .strategy import SQLOperatorRegistry

logger = logging.getLogger(__name__)


class RelationalQuery(NamedTuple):
    """Paged select and matching count, each with its own parameter list."""

    select_sql: str
    select_params: list[Any]
    count_sql: str
    count_params: list[Any]


class RelationalStatementBuilder:
    """
    Builds the listing statements for the ``response`` table.

    Every identifier comes from validated ``ListingSettings`` or from the
    field-id sanitizer; every value is bound.
    """

    def __init__(
        self,
        settings: ListingSettings = DEFAULT_SETTINGS,
        *,
        registry: SQLOperatorRegistry | None = None,
    ) -> None:
        self.settings = settings
        self._data = quote_identifier(settings.data_column)
        self._compiler = RelationalFilterCompiler(
            json_column=self._data, registry=registry
        )

    @property
    def compiler(self) -> RelationalFilterCompiler:
        return self._compiler

    def _columns(self) -> str:
        s = self.settings
        pairs = (
            (s.id_column, "id"),
            (s.form_column, "formId"),
            (s.data_column, "data"),
            (s.metadata_column, "metadata"),
            (s.submitted_column, "submittedAt"),
        )
        return ", ".join(
            quote_identifier(column)
            if column == alias
            else f'{quote_identifier(column)} AS "{alias}"'
            for column, alias in pairs
        )

    def _where(self, conditions: str | None) -> str:
        base = f"{quote_identifier(self.settings.form_column)} = $1"
        return f"{base} AND ({conditions})" if conditions else base

    def order_by(self, options: ListingOptions) -> str:
        """``ORDER BY`` body; dynamic fields sort missing values first (asc)."""
        direction = "DESC" if options.descending else "ASC"
        if options.dynamic_field is None:
            column = quote_identifier(self.settings.column_for(options.sort_by))
            return f"{column} {direction}"

        text = JsonbFieldAccessor(options.dynamic_field, self._data).text
        keys = [f"({text} IS NOT NULL)"]
        if options.numeric_sort:
            is_number = f"{text} ~ '{NUMERIC_SQL_PATTERN}'"
            keys.append(f"(CASE WHEN {is_number} THEN 0 ELSE 1 END)")
            keys.append(f"(CASE WHEN {is_number} THEN ({text})::numeric ELSE 0 END)")
        keys.append(f"LOWER({text})")
        return ", ".join(f"{key} {direction}" for key in keys)

    def build(
        self,
        form_id: str,
        filters: Iterable[ResponseFilter] | None,
        options: ListingOptions,
        filter_logic: FilterLogic | str = FilterLogic.AND,
    ) -> RelationalQuery:
        raw = self._compiler.compile(form_id, filters)
        where = self._where(raw.where(filter_logic))
        table = quote_identifier(self.settings.table)

        params = list(raw.params)
        limit = f"${len(params) + 1}"
        offset = f"${len(params) + 2}"
        select_sql = (
            f"SELECT {self._columns()} FROM {table} WHERE {where} "
            f"ORDER BY {self.order_by(options)} LIMIT {limit} OFFSET {offset}"
        )
        count_sql = f"SELECT COUNT(*) FROM {table} WHERE {where}"
        logger.debug("Relational listing query: %s", select_sql)
        return RelationalQuery(
            select_sql=select_sql,
            select_params=[*params, options.limit, options.skip],
            count_sql=count_sql,
            count_params=params,
        )

    def build_unpaged(
        self,
        form_id: str,
        filters: Iterable[ResponseFilter] | None,
        filter_logic: FilterLogic | str = FilterLogic.AND,
    ) -> tuple[str, list[Any]]:
        """Unpaged select ordered by submission time, newest first."""
        raw = self._compiler.compile(form_id, filters)
        where = self._where(raw.where(filter_logic))
        table = quote_identifier(self.settings.table)
        submitted = quote_identifier(self.settings.submitted_column)
        sql = (
            f"SELECT {self._columns()} FROM {table} WHERE {where} "
            f"ORDER BY {submitted} DESC"
        )
        return sql, list(raw.params)
