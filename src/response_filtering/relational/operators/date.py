"""Date operators for SQL over ISO-8601 text or epoch milliseconds."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...coercion import parse_date_operand
from ...operators import FilterOperator
from ..strategy import SQLOperator
from ..utils import date_guard

if TYPE_CHECKING:
    from ...accessors import JsonbFieldAccessor
    from ...model import ResponseFilter
    from ..params import ParamHelper


class DateEqualsOperator(SQLOperator):
    """Same UTC calendar day."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_EQUALS

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        moment = parse_date_operand(f.value)
        if moment is None:
            return None
        day = params.add(moment.date())
        return date_guard(
            field, lambda ts: f"({ts} AT TIME ZONE 'UTC')::date = {day}::date"
        )


class DateBeforeOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_BEFORE

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        moment = parse_date_operand(f.value)
        if moment is None:
            return None
        bound = params.add(moment)
        return date_guard(field, lambda ts: f"{ts} < {bound}::timestamptz")


class DateAfterOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_AFTER

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        moment = parse_date_operand(f.value)
        if moment is None:
            return None
        bound = params.add(moment)
        return date_guard(field, lambda ts: f"{ts} > {bound}::timestamptz")


class DateBetweenOperator(SQLOperator):
    """Inclusive range; unparseable bounds are dropped."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.DATE_BETWEEN

    def build(
        self, field: JsonbFieldAccessor, f: ResponseFilter, params: ParamHelper
    ) -> str | None:
        rng = f.date_range
        if rng is None:
            return None
        start = parse_date_operand(rng.from_)
        end = parse_date_operand(rng.to)
        if start is None and end is None:
            return None
        lower = params.add(start) if start is not None else None
        upper = params.add(end) if end is not None else None

        def compare(ts: str) -> str:
            parts = []
            if lower is not None:
                parts.append(f"{ts} >= {lower}::timestamptz")
            if upper is not None:
                parts.append(f"{ts} <= {upper}::timestamptz")
            return " AND ".join(parts)

        return date_guard(field, compare)
