"""In-memory evaluation of response filters."""

from __future__ import annotations

from .evaluator import MemoryOperator, MemoryOperatorRegistry
from .filtering import apply_response_filters, matches_filters, response_data
from .operators import build_default_registry

__all__ = [
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "apply_response_filters",
    "build_default_registry",
    "matches_filters",
    "response_data",
]
