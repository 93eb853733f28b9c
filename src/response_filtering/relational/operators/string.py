"""Case-insensitive text operators for SQL (``LOWER`` / ``ILIKE``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...operators import FilterOperator
from ..strategy import SQLOperator
from ..utils import array_elements, escape_like, text_array

if TYPE_CHECKING:
    from ...accessors import JsonbFieldAccessor
    from ...model import ResponseFilter
    from ..params import ParamHelper


class EqualsOperator(SQLOperator):
    """
    Scalar equality on the text value, or an exact order-independent match
    of an array answer when the filter carries ``values``.
    """

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQUALS

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if f.value is not None:
            return f"LOWER({field.text}) = {params.add(f.value.lower())}"
        if not f.values:
            return None
        expected = text_array(params, f.values)
        return (
            f"(CASE WHEN {field.json_type} = 'array' THEN ("
            f"jsonb_array_length({field.typed}) = {len(f.values)} AND NOT EXISTS ("
            f"SELECT 1 FROM unnest({expected}) AS expected(val) WHERE NOT EXISTS ("
            f"SELECT 1 FROM {array_elements(field)} "
            f"WHERE LOWER(elem) = expected.val))) ELSE FALSE END)"
        )


class NotEqualsOperator(SQLOperator):
    """Missing fields never match (``NULL <> x`` is not true)."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_EQUALS

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if f.value is None:
            return None
        return f"LOWER({field.text}) <> {params.add(f.value.lower())}"


class ContainsOperator(SQLOperator):
    """Array answers: one element equals the operand.  Otherwise substring."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.value:
            return None
        element = params.add(f.value.lower())
        pattern = params.add(f"%{escape_like(f.value)}%")
        return (
            f"(CASE WHEN {field.json_type} = 'array' THEN EXISTS ("
            f"SELECT 1 FROM {array_elements(field)} WHERE LOWER(elem) = {element}) "
            f"ELSE {field.text} ILIKE {pattern} END)"
        )


class NotContainsOperator(SQLOperator):
    """Negation of ``CONTAINS``; missing and ``null`` fields match."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_CONTAINS

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.value:
            return None
        element = params.add(f.value.lower())
        pattern = params.add(f"%{escape_like(f.value)}%")
        return (
            f"(CASE WHEN {field.json_type} = 'array' THEN NOT EXISTS ("
            f"SELECT 1 FROM {array_elements(field)} WHERE LOWER(elem) = {element}) "
            f"ELSE ({field.text} IS NULL OR {field.text} NOT ILIKE {pattern}) END)"
        )


class StartsWithOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.STARTS_WITH

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.value:
            return None
        pattern = params.add(f"{escape_like(f.value)}%")
        return f"({field.json_type} = 'string' AND {field.text} ILIKE {pattern})"


class EndsWithOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ENDS_WITH

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.value:
            return None
        pattern = params.add(f"%{escape_like(f.value)}")
        return f"({field.json_type} = 'string' AND {field.text} ILIKE {pattern})"
