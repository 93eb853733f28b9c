"""PostgreSQL (JSONB) compilation of response filters."""

from __future__ import annotations

from .compiler import (
    RawSQLFilter,
    RelationalFilterCompiler,
    build_postgresql_filter,
    join_conditions,
)
from .operators import DEFAULT_SQL_REGISTRY, build_default_sql_registry
from .params import ParamHelper
from .statements import RelationalQuery, RelationalStatementBuilder
from .strategy import SQLOperator, SQLOperatorRegistry

__all__ = [
    "DEFAULT_SQL_REGISTRY",
    "ParamHelper",
    "RawSQLFilter",
    "RelationalFilterCompiler",
    "RelationalQuery",
    "RelationalStatementBuilder",
    "SQLOperator",
    "SQLOperatorRegistry",
    "build_default_sql_registry",
    "build_postgresql_filter",
    "join_conditions",
]
