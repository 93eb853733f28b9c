"""Case-insensitive text operators: equals, contains, starts/ends with."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...coercion import lower_text
from ...operators import FilterOperator
from ..evaluator import MemoryOperator

if TYPE_CHECKING:
    from ...model import ResponseFilter


def lowered_elements(values: list[Any]) -> set[str]:
    """Array elements as ``jsonb_array_elements_text`` + ``LOWER`` yields them."""
    return {text for text in (lower_text(v) for v in values) if text is not None}


class _ValueOperator(MemoryOperator):
    """Base for operators that need a non-empty ``value``."""

    def has_operand(self, condition: ResponseFilter) -> bool:
        return bool(condition.value)


class EqualsOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.EQUALS

    def has_operand(self, condition: ResponseFilter) -> bool:
        return condition.value is not None or bool(condition.values)

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        if condition.value is not None:
            return lower_text(field_value) == condition.value.lower()
        # exact, order-independent array match
        expected = condition.values or ()
        if not isinstance(field_value, list) or len(field_value) != len(expected):
            return False
        elements = lowered_elements(field_value)
        return all(v.lower() in elements for v in expected)


class NotEqualsOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_EQUALS

    def has_operand(self, condition: ResponseFilter) -> bool:
        return condition.value is not None

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        text = lower_text(field_value)
        return text is not None and text != (condition.value or "").lower()


class ContainsOperator(_ValueOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.CONTAINS

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        needle = (condition.value or "").lower()
        if isinstance(field_value, list):
            return needle in lowered_elements(field_value)
        text = lower_text(field_value)
        return text is not None and needle in text


class NotContainsOperator(_ValueOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.NOT_CONTAINS

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        needle = (condition.value or "").lower()
        if isinstance(field_value, list):
            return needle not in lowered_elements(field_value)
        text = lower_text(field_value)
        return text is None or needle not in text


class StartsWithOperator(_ValueOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.STARTS_WITH

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        if not isinstance(field_value, str):
            return False
        return field_value.lower().startswith((condition.value or "").lower())


class EndsWithOperator(_ValueOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.ENDS_WITH

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        if not isinstance(field_value, str):
            return False
        return field_value.lower().endswith((condition.value or "").lower())
