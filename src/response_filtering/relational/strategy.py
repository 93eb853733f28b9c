"""
SQL operator compilation strategy.

Provides the ``SQLOperator`` interface and a registry, structured in the
same strategy pattern as the in-memory evaluator.  Each strategy renders
one ``ResponseFilter`` into a PostgreSQL boolean expression over a JSONB
field.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..accessors import JsonbFieldAccessor
    from ..model import ResponseFilter
    from ..operators import FilterOperator
    from .params import ParamHelper


class SQLOperator(ABC):
    """
    Strategy interface for compiling a filter operator into SQL text.

    Implementations must decide whether the filter yields a condition
    *before* binding any parameter: returning ``None`` after calling
    ``params.add`` would leave an orphaned placeholder.
    """

    @property
    @abstractmethod
    def name(self) -> FilterOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def build(
        self,
        field: JsonbFieldAccessor,
        f: ResponseFilter,
        params: ParamHelper,
    ) -> str | None:
        """
        Build a SQL boolean expression.

        Args:
            field: Accessor for the (already sanitized) JSONB field.
            f: The filter carrying the operands.
            params: Allocator for bound operands.

        Returns:
            The SQL fragment, or ``None`` when the filter imposes no
            condition (missing operand).
        """
        ...


class SQLOperatorRegistry:
    """Registry of ``SQLOperator`` instances keyed by :class:`FilterOperator`."""

    def __init__(self) -> None:
        self._operators: dict[FilterOperator, SQLOperator] = {}

    def register(self, operator: SQLOperator) -> None:
        self._operators[operator.name] = operator

    def register_all(self, *operators: SQLOperator) -> None:
        for op in operators:
            self.register(op)

    def unregister(self, name: FilterOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: FilterOperator) -> SQLOperator | None:
        return self._operators.get(name)

    def has(self, name: FilterOperator) -> bool:
        return name in self._operators

    @property
    def supported_operators(self) -> set[FilterOperator]:
        return set(self._operators.keys())

    def build(
        self,
        name: FilterOperator,
        field: JsonbFieldAccessor,
        f: ResponseFilter,
        params: ParamHelper,
    ) -> str | None:
        """
        Look up the operator and build.

        Raises:
            ValueError: If the operator is not registered.
        """
        op = self.get(name)
        if op is None:
            raise ValueError(f"Unsupported operator for SQL: {name}")
        return op.build(field, f, params)
