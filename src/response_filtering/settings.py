"""Listing and storage naming configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .exceptions import InvalidIdentifierError

_SQL_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_LOWER_IDENTIFIER = re.compile(r"[a-z_][a-z0-9_]*")


def is_sql_identifier(identifier: str) -> bool:
    return _SQL_IDENTIFIER.fullmatch(identifier) is not None


def quote_identifier(identifier: str) -> str:
    """
    Render a validated SQL identifier.

    Lower-case names are emitted bare; anything else is double-quoted so
    PostgreSQL keeps the case (``formId`` -> ``"formId"``).
    """
    if _LOWER_IDENTIFIER.fullmatch(identifier):
        return identifier
    return f'"{identifier}"'


@dataclass(frozen=True)
class ListingSettings:
    """
    Immutable configuration for response listing.

    Attributes:
        default_limit: Page size used when the caller gives none or garbage.
        max_limit: Upper bound for the page size.
        default_sort_by: Sort key used when the requested key is invalid.
        default_sort_order: ``"asc"`` or ``"desc"``.
        sortable_fields: Fixed record columns that may be sorted on.
        dynamic_sort_prefix: Prefix marking a sort on a response data field.
        numeric_dynamic_sort: Order numeric-looking dynamic values by number
            instead of as strings.
        table / *_column: Relational naming (``response`` table, camelCase
            columns as written by the form backend).
        data_field / form_field: Document naming.
    """

    default_limit: int = 10
    max_limit: int = 100
    default_sort_by: str = "submittedAt"
    default_sort_order: str = "desc"
    sortable_fields: tuple[str, ...] = ("id", "submittedAt")
    dynamic_sort_prefix: str = "data."
    numeric_dynamic_sort: bool = False

    table: str = "response"
    id_column: str = "id"
    form_column: str = "formId"
    data_column: str = "data"
    metadata_column: str = "metadata"
    submitted_column: str = "submittedAt"

    data_field: str = "data"
    form_field: str = "formId"

    def __post_init__(self) -> None:
        for name in (
            "table",
            "id_column",
            "form_column",
            "data_column",
            "metadata_column",
            "submitted_column",
        ):
            value = getattr(self, name)
            if not is_sql_identifier(value):
                raise InvalidIdentifierError(name, value)
        if self.max_limit < 1:
            raise ValueError("max_limit must be at least 1")
        if not 1 <= self.default_limit <= self.max_limit:
            raise ValueError("default_limit must be between 1 and max_limit")

    def column_for(self, sort_key: str) -> str:
        """Map a fixed sort key to its relational column name."""
        return {
            "id": self.id_column,
            "submittedAt": self.submitted_column,
        }.get(sort_key, sort_key)


DEFAULT_SETTINGS = ListingSettings()
