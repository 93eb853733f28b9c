"""Date operators over ISO-8601 strings, epoch milliseconds or datetimes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...coercion import parse_date_operand, to_datetime
from ...operators import FilterOperator
from ..evaluator import MemoryOperator

if TYPE_CHECKING:
    from ...model import ResponseFilter


class _SingleDateOperator(MemoryOperator):
    def has_operand(self, condition: ResponseFilter) -> bool:
        return parse_date_operand(condition.value) is not None


class DateEqualsOperator(_SingleDateOperator):
    """Same UTC calendar day."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_EQUALS

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        moment = to_datetime(field_value)
        operand = parse_date_operand(condition.value)
        if moment is None or operand is None:
            return False
        return moment.date() == operand.date()


class DateBeforeOperator(_SingleDateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_BEFORE

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        moment = to_datetime(field_value)
        operand = parse_date_operand(condition.value)
        if moment is None or operand is None:
            return False
        return moment < operand


class DateAfterOperator(_SingleDateOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_AFTER

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        moment = to_datetime(field_value)
        operand = parse_date_operand(condition.value)
        if moment is None or operand is None:
            return False
        return moment > operand


class DateBetweenOperator(MemoryOperator):
    """Inclusive; unparseable bounds are dropped."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_BETWEEN

    def has_operand(self, condition: ResponseFilter) -> bool:
        rng = condition.date_range
        if rng is None:
            return False
        return (
            parse_date_operand(rng.from_) is not None
            or parse_date_operand(rng.to) is not None
        )

    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        moment = to_datetime(field_value)
        rng = condition.date_range
        if moment is None or rng is None:
            return False
        start = parse_date_operand(rng.from_)
        end = parse_date_operand(rng.to)
        if start is not None and moment < start:
            return False
        return not (end is not None and moment > end)
