"""
SQL fragment helpers shared by the relational operator strategies.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from ..coercion import (
    EPOCH_MS_SQL_PATTERN,
    ISO_DATE_SQL_PATTERN,
    NUMERIC_SQL_PATTERN,
    TZ_SUFFIX_SQL_PATTERN,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from ..accessors import JsonbFieldAccessor
    from .params import ParamHelper


def escape_like(value: str) -> str:
    """Escape ``LIKE`` wildcards so the operand matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def text_array(params: ParamHelper, values: Iterable[str]) -> str:
    """Bind lower-cased *values* and return ``ARRAY[$a, $b]::text[]``."""
    placeholders = params.add_all([v.lower() for v in values])
    return f"ARRAY[{', '.join(placeholders)}]::text[]"


def bind_number(params: ParamHelper, number: float) -> str:
    return f"{params.add(Decimal(str(number)))}::numeric"


def array_elements(field: JsonbFieldAccessor) -> str:
    return f"jsonb_array_elements_text({field.typed}) AS elem"


def numeric_guard(field: JsonbFieldAccessor, comparison: str) -> str:
    """
    Evaluate *comparison* only for values whose text is a plain decimal.

    The ``CASE`` forces PostgreSQL to test the pattern before the
    ``::numeric`` cast, so malformed stored values yield ``FALSE``.
    """
    return (
        f"(CASE WHEN {field.text} ~ '{NUMERIC_SQL_PATTERN}' "
        f"THEN {comparison} ELSE FALSE END)"
    )


def numeric_value(field: JsonbFieldAccessor) -> str:
    return f"({field.text})::numeric"


def calendar_day_check(text: str) -> str:
    """
    ``TRUE`` when the day of an ISO date exists in its month.

    Only valid after ``ISO_DATE_SQL_PATTERN`` matched: the substrings are
    digits and ``make_date(year, month, 1)`` cannot fail.
    """
    last_day = (
        f"extract(day from make_date(substr({text}, 1, 4)::int, "
        f"substr({text}, 6, 2)::int, 1) + interval '1 month - 1 day')"
    )
    return f"substr({text}, 9, 2)::int <= {last_day}"


def date_guard(field: JsonbFieldAccessor, comparison: Callable[[str], str]) -> str:
    """
    Evaluate ``comparison(timestamp_expr)`` for ISO dates and epoch millis.

    ISO text without an offset is read as UTC.  Anything else, including
    ISO-shaped text naming a day the month does not have, yields ``FALSE``
    instead of a cast error.  The calendar check sits in its own ``CASE``
    so it runs after the pattern test and before any cast.
    """
    text = field.text
    iso = (
        f"(CASE WHEN {text} ~ '{TZ_SUFFIX_SQL_PATTERN}' "
        f"THEN ({text})::timestamptz "
        f"ELSE ({text})::timestamp AT TIME ZONE 'UTC' END)"
    )
    epoch = f"to_timestamp(({text})::numeric / 1000)"
    return (
        f"(CASE WHEN {text} ~ '{ISO_DATE_SQL_PATTERN}' "
        f"THEN (CASE WHEN {calendar_day_check(text)} THEN {comparison(iso)} "
        f"ELSE FALSE END) "
        f"WHEN {text} ~ '{EPOCH_MS_SQL_PATTERN}' THEN {comparison(epoch)} "
        f"ELSE FALSE END)"
    )
