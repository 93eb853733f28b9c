"""Set operators: in, not_in, contains_all."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...coercion import lower_text
from ...operators import FilterOperator
from ..evaluator import MemoryOperator
from .string import lowered_elements

if TYPE_CHECKING:
    from ...model import ResponseFilter


def _options(condition: ResponseFilter) -> set[str]:
    return {v.lower() for v in condition.values or ()}


class _ValuesOperator(MemoryOperator):
    def has_operand(self, condition: ResponseFilter) -> bool:
        return bool(condition.values)


class InOperator(_ValuesOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IN

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        options = _options(condition)
        if isinstance(field_value, list):
            return not lowered_elements(field_value).isdisjoint(options)
        return lower_text(field_value) in options


class NotInOperator(_ValuesOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_IN

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        options = _options(condition)
        if isinstance(field_value, list):
            return lowered_elements(field_value).isdisjoint(options)
        text = lower_text(field_value)
        return text is None or text not in options


class ContainsAllOperator(_ValuesOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS_ALL

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        if not isinstance(field_value, list):
            return False
        return _options(condition) <= lowered_elements(field_value)
