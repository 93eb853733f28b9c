"""Numeric comparisons: greater_than, less_than, between."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...coercion import parse_number_operand, to_number
from ...operators import FilterOperator
from ..evaluator import MemoryOperator

if TYPE_CHECKING:
    from ...model import ResponseFilter


class _OperandComparison(MemoryOperator):
    def has_operand(self, condition: ResponseFilter) -> bool:
        return parse_number_operand(condition.value) is not None


class GreaterThanOperator(_OperandComparison):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.GREATER_THAN

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        number = to_number(field_value)
        operand = parse_number_operand(condition.value)
        if number is None or operand is None:
            return False
        return number > operand


class LessThanOperator(_OperandComparison):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.LESS_THAN

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        number = to_number(field_value)
        operand = parse_number_operand(condition.value)
        if number is None or operand is None:
            return False
        return number < operand


class BetweenOperator(MemoryOperator):
    """Inclusive; an absent bound is unconstrained."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.BETWEEN

    def has_operand(self, condition: ResponseFilter) -> bool:
        rng = condition.number_range
        return rng is not None and not rng.is_empty

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        number = to_number(field_value)
        rng = condition.number_range
        if number is None or rng is None:
            return False
        if rng.min is not None and number < rng.min:
            return False
        return not (rng.max is not None and number > rng.max)
