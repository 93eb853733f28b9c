"""
SQL operator implementations and default registry.

Usage::

    from response_filtering.relational.operators import DEFAULT_SQL_REGISTRY

    sql = DEFAULT_SQL_REGISTRY.build(FilterOperator.EQUALS, field, f, params)
"""

from __future__ import annotations

from ..strategy import SQLOperatorRegistry
from .date import (
    DateAfterOperator,
    DateBeforeOperator,
    DateBetweenOperator,
    DateEqualsOperator,
)
from .null import IsEmptyOperator, IsNotEmptyOperator
from .set import ContainsAllOperator, InOperator, NotInOperator
from .standard import BetweenOperator, GreaterThanOperator, LessThanOperator
from .string import (
    ContainsOperator,
    EndsWithOperator,
    EqualsOperator,
    NotContainsOperator,
    NotEqualsOperator,
    StartsWithOperator,
)


def build_default_sql_registry() -> SQLOperatorRegistry:
    """Create a registry with all built-in SQL operators."""
    registry = SQLOperatorRegistry()
    registry.register_all(
        # Null / empty
        IsEmptyOperator(),
        IsNotEmptyOperator(),
        # String
        EqualsOperator(),
        NotEqualsOperator(),
        ContainsOperator(),
        NotContainsOperator(),
        StartsWithOperator(),
        EndsWithOperator(),
        # Numeric
        GreaterThanOperator(),
        LessThanOperator(),
        BetweenOperator(),
        # Set
        InOperator(),
        NotInOperator(),
        ContainsAllOperator(),
        # Date
        DateEqualsOperator(),
        DateBeforeOperator(),
        DateAfterOperator(),
        DateBetweenOperator(),
    )
    return registry


DEFAULT_SQL_REGISTRY: SQLOperatorRegistry = build_default_sql_registry()

__all__ = [
    "DEFAULT_SQL_REGISTRY",
    "SQLOperatorRegistry",
    "build_default_sql_registry",
]
