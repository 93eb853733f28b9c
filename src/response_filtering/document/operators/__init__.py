"""MongoDB operator compilers for response filters."""

from __future__ import annotations

from .null import NULL_COMPILERS, compile_is_empty, compile_is_not_empty
from .set import SET_COMPILERS, compile_contains_all, compile_in, compile_not_in
from .standard import (
    STANDARD_COMPILERS,
    compile_between,
    compile_greater_than,
    compile_less_than,
)
from .string import (
    STRING_COMPILERS,
    compile_contains,
    compile_ends_with,
    compile_equals,
    compile_not_contains,
    compile_not_equals,
    compile_starts_with,
)

DEFAULT_COMPILERS = {
    **NULL_COMPILERS,
    **STRING_COMPILERS,
    **STANDARD_COMPILERS,
    **SET_COMPILERS,
}

__all__ = [
    "DEFAULT_COMPILERS",
    "compile_between",
    "compile_contains",
    "compile_contains_all",
    "compile_ends_with",
    "compile_equals",
    "compile_greater_than",
    "compile_in",
    "compile_is_empty",
    "compile_is_not_empty",
    "compile_less_than",
    "compile_not_contains",
    "compile_not_equals",
    "compile_not_in",
    "compile_starts_with",
]
