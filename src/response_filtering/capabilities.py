"""
Pushdown classification: which filters a backend evaluates natively.

The document store cannot compare dates stored as strings or epoch
numbers, so date operators fall back to memory evaluation there.  The
relational compiler guards every cast and expresses all operators, so it
never needs a memory fallback.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

from .exceptions import UnsupportedBackendError
from .operators import DATE_OPERATORS, FilterOperator

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import ResponseFilter


class Backend(str, Enum):
    """Storage engine a filter list is compiled for."""

    DOCUMENT = "document"
    RELATIONAL = "relational"


_UNSUPPORTED: dict[Backend, frozenset[FilterOperator]] = {
    Backend.DOCUMENT: DATE_OPERATORS,
    Backend.RELATIONAL: frozenset(),
}


class FilterPartition(NamedTuple):
    pushable: list[ResponseFilter]
    memory_only: list[ResponseFilter]


def resolve_backend(backend: Backend | str) -> Backend:
    """Return *backend* as a ``Backend``; unknown kinds raise."""
    try:
        return Backend(backend)
    except ValueError:
        raise UnsupportedBackendError(backend) from None


def is_pushable(f: ResponseFilter, backend: Backend | str) -> bool:
    # Unknown operators compile to no-ops, so they never force a fallback.
    op = f.resolved_operator
    return op is None or op not in _UNSUPPORTED[resolve_backend(backend)]


def can_filter_at_database(
    filters: Iterable[ResponseFilter] | None,
    backend: Backend | str,
) -> bool:
    """Return ``True`` if every filter can be evaluated by *backend*."""
    resolved = resolve_backend(backend)
    return all(is_pushable(f, resolved) for f in filters or ())


def partition_filters(
    filters: Iterable[ResponseFilter] | None,
    backend: Backend | str = Backend.DOCUMENT,
) -> FilterPartition:
    """Split *filters* into database-evaluable and memory-only lists."""
    resolved = resolve_backend(backend)
    pushable: list[ResponseFilter] = []
    memory_only: list[ResponseFilter] = []
    for f in filters or ():
        (pushable if is_pushable(f, resolved) else memory_only).append(f)
    return FilterPartition(pushable=pushable, memory_only=memory_only)


def get_memory_only_filters(
    filters: Iterable[ResponseFilter] | None,
    backend: Backend | str = Backend.DOCUMENT,
) -> list[ResponseFilter]:
    return partition_filters(filters, backend).memory_only
