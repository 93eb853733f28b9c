"""
In-memory operator evaluation strategy.

Provides the ``MemoryOperator`` interface and a registry that maps
``FilterOperator`` to an evaluation strategy.  Semantics mirror the SQL
strategies in ``relational.operators`` so that a record matches in memory
exactly when the equivalent PostgreSQL predicate would select it.

New operators are added by subclassing ``MemoryOperator`` and registering
via ``register()``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..model import ResponseFilter
    from ..operators import FilterOperator


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    ``evaluate`` is only called for filters where ``has_operand`` is true
    and must never raise on malformed stored values (it returns ``False``).
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    def has_operand(self, condition: ResponseFilter) -> bool:
        """Whether *condition* carries what this operator needs."""
        return True

    @abstractmethod
    def evaluate(self, field_value: Any, condition: ResponseFilter) -> bool:
        """
        Evaluate the operator against a concrete stored value.

        Args:
            field_value: The value under the filter's field id (``None`` when
                absent).
            condition: The filter carrying the operands.

        Returns:
            True if the condition is satisfied.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of ``MemoryOperator`` instances keyed by ``FilterOperator``.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualsOperator())

        result = registry.evaluate(FilterOperator.EQUALS, actual, condition)
    """

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, MemoryOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: MemoryOperator) -> None:
        """Register an operator strategy instance."""
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        """Register multiple operator strategy instances at once."""
        for op in operators:
            self.register(op)

    def unregister(self, name: FilterOperator) -> None:
        """Remove an operator from the registry."""
        self._operators.pop(name, None)

    # -- look-up -------------------------------------------------------------

    def get(self, name: FilterOperator) -> MemoryOperator | None:
        """Return the registered operator or ``None``."""
        return self._operators.get(name)

    def has(self, name: FilterOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    # -- evaluation shortcut -------------------------------------------------

    def evaluate(
        self,
        name: FilterOperator,
        field_value: Any,
        condition: ResponseFilter,
    ) -> bool:
        """
        Look up the operator and evaluate.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for in-memory evaluation: {name}")
        return op.evaluate(field_value, condition)
