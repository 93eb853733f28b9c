"""Numeric comparisons -> ``$gt``, ``$lt``, ``$gte``/``$lte``.

Operands are cast to float here; whether the stored field is numeric is
left to the store (strings never compare greater than numbers in Mongo).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...coercion import parse_number_operand
from ...operators import FilterOperator

if TYPE_CHECKING:
    from ...model import ResponseFilter


def compile_greater_than(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    number = parse_number_operand(f.value)
    if number is None:
        return None
    return {field: {"$gt": number}}


def compile_less_than(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    number = parse_number_operand(f.value)
    if number is None:
        return None
    return {field: {"$lt": number}}


def compile_between(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    rng = f.number_range
    if rng is None or rng.is_empty:
        return None
    bounds: dict[str, float] = {}
    if rng.min is not None:
        bounds["$gte"] = rng.min
    if rng.max is not None:
        bounds["$lte"] = rng.max
    return {field: bounds}


STANDARD_COMPILERS = {
    FilterOperator.GREATER_THAN: compile_greater_than,
    FilterOperator.LESS_THAN: compile_less_than,
    FilterOperator.BETWEEN: compile_between,
}
