"""
In-memory operator implementations.

Usage::

    from response_filtering.memory.operators import build_default_registry

    registry = build_default_registry()
    result = registry.evaluate(FilterOperator.EQUALS, actual, condition)
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
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


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Create a registry with all built-in operators.

    Returns a fresh instance on every call, so callers may register or
    unregister operators without affecting other evaluators.
    """
    registry = MemoryOperatorRegistry()
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


__all__ = [
    "MemoryOperatorRegistry",
    "build_default_registry",
]
