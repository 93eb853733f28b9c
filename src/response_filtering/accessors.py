"""
Typed accessors for dynamic (schemaless) response fields.

Each backend renders a field reference in two flavours: *typed* (the
stored JSON value, for type and array inspection) and *text* (for string
comparison).  Compilers go through these instead of concatenating paths.
"""

from __future__ import annotations

from .sanitizer import ensure_safe_field_id


class JsonbFieldAccessor:
    """``data->'field'`` (typed) and ``data->>'field'`` (text) in PostgreSQL."""

    __slots__ = ("column", "field_id")

    def __init__(self, field_id: str, column: str = "data") -> None:
        self.field_id = ensure_safe_field_id(field_id)
        self.column = column

    @property
    def typed(self) -> str:
        return f"{self.column}->'{self.field_id}'"

    @property
    def text(self) -> str:
        return f"{self.column}->>'{self.field_id}'"

    @property
    def json_type(self) -> str:
        return f"jsonb_typeof({self.typed})"

    def __repr__(self) -> str:
        return f"JsonbFieldAccessor({self.text})"


class DocumentFieldAccessor:
    """Dotted path (``data.field``) into a Mongo document."""

    __slots__ = ("field_id", "prefix")

    def __init__(self, field_id: str, prefix: str = "data") -> None:
        # "." or "$" in a field id would address a different field.
        self.field_id = ensure_safe_field_id(field_id)
        self.prefix = prefix

    @property
    def path(self) -> str:
        return f"{self.prefix}.{self.field_id}" if self.prefix else self.field_id

    typed = path
    text = path

    def __repr__(self) -> str:
        return f"DocumentFieldAccessor({self.path})"
