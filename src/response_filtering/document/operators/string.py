"""Text operators -> case-insensitive ``$regex`` (operand escaped)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from ...operators import FilterOperator

if TYPE_CHECKING:
    from ...model import ResponseFilter


def _regex_escape(s: str) -> str:
    """Escape special regex characters in a literal string."""
    return re.escape(s)


def iregex(pattern: str) -> dict[str, Any]:
    return {"$regex": pattern, "$options": "i"}


def iequals(value: str) -> dict[str, Any]:
    """Anchored, case-insensitive equality: ``Yes`` matches ``yes``."""
    return iregex(f"^{_regex_escape(value)}$")


def not_iequals(value: str) -> dict[str, Any]:
    """
    Negated ``iequals``.

    ``$not`` takes a regex object rather than a ``$regex``/``$options``
    document on every server version.
    """
    return {"$not": re.compile(f"^{_regex_escape(value)}$", re.IGNORECASE)}


def _not_array(field: str) -> dict[str, Any]:
    return {field: {"$not": {"$type": "array"}}}


def compile_equals(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if f.value is not None:
        # A scalar operand never matches an array answer.
        return {"$and": [_not_array(field), {field: iequals(f.value)}]}
    if f.values:
        # Exact, order-independent set match for checkbox answers.
        return {
            "$and": [
                {field: {"$type": "array", "$size": len(f.values)}},
                *({field: iequals(v)} for v in f.values),
            ]
        }
    return None


def compile_not_equals(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if f.value is None:
        return None
    return {
        "$and": [
            {field: {"$exists": True, "$ne": None}},
            {"$or": [{field: {"$type": "array"}}, {field: not_iequals(f.value)}]},
        ]
    }


def compile_contains(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if not f.value:
        return None
    return {
        "$or": [
            # arrays: one element equals the operand
            {"$and": [{field: {"$type": "array"}}, {field: iequals(f.value)}]},
            # strings: substring
            {"$and": [_not_array(field), {field: iregex(_regex_escape(f.value))}]},
        ]
    }


def compile_not_contains(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    contains = compile_contains(field, f)
    if contains is None:
        return None
    return {"$nor": [contains]}


def compile_starts_with(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if not f.value:
        return None
    return {
        "$and": [_not_array(field), {field: iregex("^" + _regex_escape(f.value))}]
    }


def compile_ends_with(field: str, f: ResponseFilter) -> dict[str, Any] | None:
    if not f.value:
        return None
    return {
        "$and": [_not_array(field), {field: iregex(_regex_escape(f.value) + "$")}]
    }


STRING_COMPILERS = {
    FilterOperator.EQUALS: compile_equals,
    FilterOperator.NOT_EQUALS: compile_not_equals,
    FilterOperator.CONTAINS: compile_contains,
    FilterOperator.NOT_CONTAINS: compile_not_contains,
    FilterOperator.STARTS_WITH: compile_starts_with,
    FilterOperator.ENDS_WITH: compile_ends_with,
}
