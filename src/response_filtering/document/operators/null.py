"""Emptiness checks -> ``$exists``, ``$eq null``, ``""`` and ``$size 0``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...operators import FilterOperator

if TYPE_CHECKING:
    from ...model import ResponseFilter


def compile_is_empty(field: str, _f: ResponseFilter) -> dict[str, Any]:
    return {
        "$or": [
            {field: {"$exists": False}},
            {field: {"$eq": None}},
            {field: {"$eq": ""}},
            {field: {"$size": 0}},
        ]
    }


def compile_is_not_empty(field: str, _f: ResponseFilter) -> dict[str, Any]:
    return {
        "$and": [
            {field: {"$exists": True}},
            {field: {"$ne": None}},
            {field: {"$ne": ""}},
            {field: {"$not": {"$size": 0}}},
        ]
    }


NULL_COMPILERS = {
    FilterOperator.IS_EMPTY: compile_is_empty,
    FilterOperator.IS_NOT_EMPTY: compile_is_not_empty,
}
