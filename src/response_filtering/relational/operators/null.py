"""Null / empty check operators for SQL."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ...operators import FilterOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from ...accessors import JsonbFieldAccessor
    from ...model import ResponseFilter
    from ..params import ParamHelper


class IsEmptyOperator(SQLOperator):
    """Absent, JSON ``null``, ``""`` or ``[]``."""

    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_EMPTY

    def build(
        self, field: JsonbFieldAccessor, _f: ResponseFilter, _params: ParamHelper
    ) -> str:
        return (
            f"({field.text} IS NULL OR {field.text} = '' "
            f"OR {field.typed} = '[]'::jsonb)"
        )


class IsNotEmptyOperator(SQLOperator):
    @property
    def name(self) -> FilterOperator:
        return FilterOperator.IS_NOT_EMPTY

    def build(
        self, field: JsonbFieldAccessor, _f: ResponseFilter, _params: ParamHelper
    ) -> str:
        return (
            f"({field.text} IS NOT NULL AND {field.text} <> '' "
            f"AND {field.typed} <> '[]'::jsonb)"
        )
