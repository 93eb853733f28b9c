"""Field identifier validation before any query text is built."""

from __future__ import annotations

import re
from typing import Any

from .exceptions import UnsafeFieldIdError

SAFE_FIELD_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def is_safe_field_id(field_id: Any) -> bool:
    """Return ``True`` when *field_id* consists only of ``[A-Za-z0-9_-]``."""
    if not isinstance(field_id, str):
        return False
    return SAFE_FIELD_ID_PATTERN.fullmatch(field_id) is not None


def ensure_safe_field_id(field_id: Any) -> str:
    """
    Return *field_id* unchanged if it is safe to embed in a query.

    JSON path keys cannot be bound as parameters, so the relational
    compiler splices the id into ``data->'<id>'``.  Anything outside the
    allowed character class is rejected.

    Raises:
        UnsafeFieldIdError: If the identifier is empty or contains any
            other character (quotes, whitespace, operators, ...).
    """
    if not is_safe_field_id(field_id):
        raise UnsafeFieldIdError(field_id)
    return field_id
