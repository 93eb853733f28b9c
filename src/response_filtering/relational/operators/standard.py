"""Numeric comparison operators for SQL, guarded against non-numeric data."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...coercion import parse_number_operand
from ...operators import FilterOperator
from ..strategy import SQLOperator
from ..utils import bind_number, numeric_guard, numeric_value

if TYPE_CHECKING:
    from ...accessors import JsonbFieldAccessor
    from ...model import ResponseFilter
    from ..params import ParamHelper


class GreaterThanOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GREATER_THAN

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        number = parse_number_operand(f.value)
        if number is None:
            return None
        return numeric_guard(
            field, f"{numeric_value(field)} > {bind_number(params, number)}"
        )


class LessThanOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LESS_THAN

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        number = parse_number_operand(f.value)
        if number is None:
            return None
        return numeric_guard(
            field, f"{numeric_value(field)} < {bind_number(params, number)}"
        )


class BetweenOperator(SQLOperator):
    """Inclusive range; an absent bound is unconstrained."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.BETWEEN

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        rng = f.number_range
        if rng is None or rng.is_empty:
            return None
        value = numeric_value(field)
        parts = []
        if rng.min is not None:
            parts.append(f"{value} >= {bind_number(params, rng.min)}")
        if rng.max is not None:
            parts.append(f"{value} <= {bind_number(params, rng.max)}")
        return numeric_guard(field, " AND ".join(parts))
