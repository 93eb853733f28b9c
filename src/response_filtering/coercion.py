"""
Total (never-raising) coercions of stored JSON values and filter operands.

The relational compiler embeds the ``*_SQL_PATTERN`` strings in
``CASE WHEN`` guards; the memory evaluator applies the equivalent Python
patterns.  Both sides therefore agree on which stored values count as
numbers or dates, and both degrade to "predicate false" otherwise.
"""

from __future__ import annotations

import json
import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

# ---------------------------------------------------------------------------
# Patterns (SQL text form + Python form)
# ---------------------------------------------------------------------------

NUMERIC_SQL_PATTERN = r"^-?[0-9]+(\.[0-9]+)?$"
# Offsets stop below 16 hours, the PostgreSQL input limit.
ISO_DATE_SQL_PATTERN = (
    r"^[1-9][0-9]{3}-(0[1-9]|1[0-2])-(0[1-9]|[12][0-9]|3[01])"
    r"([T ]([01][0-9]|2[0-3]):[0-5][0-9](:[0-5][0-9](\.[0-9]+)?)?"
    r"(Z|[+-](0[0-9]|1[0-5])(:?[0-5][0-9])?)?)?$"
)
# Only meaningful once ISO_DATE_SQL_PATTERN matched: an offset follows a time.
TZ_SUFFIX_SQL_PATTERN = r"[T ].*(Z|[+-][0-9]{2}(:?[0-9]{2})?)$"
# Up to 13 digits keeps epoch milliseconds inside the timestamp range.
EPOCH_MS_SQL_PATTERN = r"^[0-9]{1,13}$"

_NUMERIC = re.compile(r"-?[0-9]+(\.[0-9]+)?")
_EPOCH_MS = re.compile(r"[0-9]{1,13}")
_ISO_DATE = re.compile(
    r"(?P<year>[1-9][0-9]{3})-(?P<month>0[1-9]|1[0-2])-(?P<day>0[1-9]|[12][0-9]|3[01])"
    r"(?:[T ](?P<hour>[01][0-9]|2[0-3]):(?P<minute>[0-5][0-9])"
    r"(?::(?P<second>[0-5][0-9])(?:\.(?P<fraction>[0-9]+))?)?"
    r"(?P<tz>Z|[+-](?:0[0-9]|1[0-5])(?::?[0-5][0-9])?)?)?"
)


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def as_text(value: Any) -> str | None:
    """
    Render a stored JSON value the way PostgreSQL's ``->>`` does.

    Strings come back unchanged, ``null`` becomes ``None`` and everything
    else is rendered as JSON text (``true``, ``5``, ``["a", "b"]``).
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, datetime | date):
        return value.isoformat()
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


def lower_text(value: Any) -> str | None:
    text = as_text(value)
    return text.lower() if text is not None else None


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


def to_number(value: Any) -> float | None:
    """Return a stored value as a float, or ``None`` if it is not numeric."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str) and _NUMERIC.fullmatch(value):
        return float(value)
    return None


def parse_number_operand(value: Any) -> float | None:
    """Parse a filter operand; ``None`` for missing or non-numeric input."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def _tz_from_suffix(suffix: str | None) -> timezone:
    if not suffix or suffix == "Z":
        return timezone.utc
    sign = -1 if suffix[0] == "-" else 1
    digits = suffix[1:].replace(":", "")
    hours = int(digits[:2])
    minutes = int(digits[2:4]) if len(digits) > 2 else 0
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_iso(text: str) -> datetime | None:
    match = _ISO_DATE.fullmatch(text)
    if match is None:
        return None
    parts = match.groupdict()
    fraction = (parts["fraction"] or "0")[:6].ljust(6, "0")
    try:
        parsed = datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            int(fraction),
            tzinfo=_tz_from_suffix(parts["tz"]),
        ).astimezone(timezone.utc)
    except (ValueError, OverflowError):
        # e.g. 2024-02-30: shape is right, calendar is not
        return None
    return parsed


def to_datetime(value: Any) -> datetime | None:
    """
    Interpret a stored value as an aware UTC datetime.

    Accepts ``datetime``/``date`` objects, ISO-8601 strings and epoch
    milliseconds (as digits or JSON integers).  Naive values are UTC.
    Returns ``None`` for anything else.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, bool) or value is None:
        return None
    text = as_text(value) if isinstance(value, int | float) else value
    if not isinstance(text, str):
        return None
    if _EPOCH_MS.fullmatch(text):
        return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)
    return _parse_iso(text)


def parse_date_operand(value: Any) -> datetime | None:
    """Parse a date filter operand; ``None`` when missing or malformed."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    return to_datetime(value)
