"""Operator vocabulary shared by every filter backend."""

from __future__ import annotations

from enum import Enum
from typing import Any


class FilterOperator(str, Enum):
    """Supported response filter operators."""

    # Null/Empty checks
    IS_EMPTY = "IS_EMPTY"
    IS_NOT_EMPTY = "IS_NOT_EMPTY"

    # Text comparison
    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"

    # Numeric comparison
    GREATER_THAN = "GREATER_THAN"
    LESS_THAN = "LESS_THAN"
    BETWEEN = "BETWEEN"

    # Set membership
    IN = "IN"
    NOT_IN = "NOT_IN"
    CONTAINS_ALL = "CONTAINS_ALL"

    # Dates
    DATE_EQUALS = "DATE_EQUALS"
    DATE_BEFORE = "DATE_BEFORE"
    DATE_AFTER = "DATE_AFTER"
    DATE_BETWEEN = "DATE_BETWEEN"


class FilterLogic(str, Enum):
    """How a flat list of filters is combined."""

    AND = "AND"
    OR = "OR"


DATE_OPERATORS: frozenset[FilterOperator] = frozenset(
    {
        FilterOperator.DATE_EQUALS,
        FilterOperator.DATE_BEFORE,
        FilterOperator.DATE_AFTER,
        FilterOperator.DATE_BETWEEN,
    }
)


def resolve_operator(raw: Any) -> FilterOperator | None:
    """Return the matching ``FilterOperator`` or ``None`` for unknown input."""
    if isinstance(raw, FilterOperator):
        return raw
    try:
        return FilterOperator(str(raw).upper())
    except ValueError:
        return None


def resolve_logic(raw: Any) -> FilterLogic:
    """Return the filter logic; anything other than ``OR`` means ``AND``."""
    if isinstance(raw, FilterLogic):
        return raw
    if isinstance(raw, str) and raw.upper() == FilterLogic.OR.value:
        return FilterLogic.OR
    return FilterLogic.AND
