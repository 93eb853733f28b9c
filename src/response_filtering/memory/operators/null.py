"""Null / empty check operators: is_empty, is_not_empty."""

from __future__ import annotations

from typing import Any

from ...operators import FilterOperator
from ..evaluator import MemoryOperator


def is_empty_value(value: Any) -> bool:
    """Absent, ``null``, ``""`` or ``[]``; whitespace is not empty."""
    if value is None or value == "":
        return True
    return isinstance(value, list) and not value


class IsEmptyOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_EMPTY

    def evaluate(self, field_value: Any, _condition: Any) -> bool:
        return is_empty_value(field_value)


class IsNotEmptyOperator(MemoryOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_NOT_EMPTY

    def evaluate(self, field_value: Any, _condition: Any) -> bool:
        return not is_empty_value(field_value)
