"""Set membership -> per-value case-insensitive regexes.

A native ``$in`` would be case-sensitive, so ``IN``/``NOT_IN`` expand to
``$or``/``$and`` of anchored regexes with the same semantics as ``EQUALS``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...operators import FilterOperator
from .string import iequals, not_iequals

if TYPE_CHECKING:
    from ...model import ResponseFilter


def compile_in(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if not f.values:
        return None
    return {"$or": [{field: iequals(v)} for v in f.values]}


def compile_not_in(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if not f.values:
        return None
    return {"$and": [{field: not_iequals(v)} for v in f.values]}


def compile_contains_all(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if not f.values:
        return None
    return {
        "$and": [
            {field: {"$type": "array"}},
            *({field: iequals(v)} for v in f.values),
        ]
    }


SET_COMPILERS = {
    FilterOperator.IN: compile_in,
    FilterOperator.NOT_IN: compile_not_in,
    FilterOperator.CONTAINS_ALL: compile_contains_all,
}
