"""Set membership operators for SQL (``ANY(ARRAY[...]::text[])``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...operators import FilterOperator
from ..strategy import SQLOperator
from ..utils import array_elements, text_array

if TYPE_CHECKING:
    from ...accessors import JsonbFieldAccessor
    from ...model import ResponseFilter
    from ..params import ParamHelper


class InOperator(SQLOperator):
    """Scalar in the set, or any array element in the set."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.values:
            return None
        options = text_array(params, f.values)
        return (
            f"(CASE WHEN {field.json_type} = 'array' THEN EXISTS ("
            f"SELECT 1 FROM {array_elements(field)} "
            f"WHERE LOWER(elem) = ANY({options})) "
            f"ELSE LOWER({field.text}) = ANY({options}) END)"
        )


class NotInOperator(SQLOperator):
    """No scalar or array element in the set; missing fields match."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.values:
            return None
        options = text_array(params, f.values)
        return (
            f"(CASE WHEN {field.json_type} = 'array' THEN NOT EXISTS ("
            f"SELECT 1 FROM {array_elements(field)} "
            f"WHERE LOWER(elem) = ANY({options})) "
            f"ELSE ({field.text} IS NULL "
            f"OR NOT (LOWER({field.text}) = ANY({options}))) END)"
        )


class ContainsAllOperator(SQLOperator):
    """Array answer holding every listed value (extra elements allowed)."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS_ALL

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        if not f.values:
            return None
        expected = text_array(params, f.values)
        return (
            f"(CASE WHEN {field.json_type} = 'array' THEN NOT EXISTS ("
            f"SELECT 1 FROM unnest({expected}) AS expected(val) WHERE NOT EXISTS ("
            f"SELECT 1 FROM {array_elements(field)} "
            f"WHERE LOWER(elem) = expected.val)) ELSE FALSE END)"
        )
