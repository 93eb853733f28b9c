"""
Response filtering exception hierarchy.

All exceptions inherit from ``ResponseFilterError`` and provide
``to_dict()`` for API-friendly error responses.

Only unsafe identifiers are fatal at compile time.  Missing operands and
unknown operators never raise: they compile to "no condition".
"""

from __future__ import annotations

from typing import Any


class ResponseFilterError(Exception):
    """Base exception for all response filtering errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class UnsafeFieldIdError(ResponseFilterError, ValueError):
    """
    A field identifier contains characters outside ``[A-Za-z0-9_-]``.

    Field ids are spliced into SQL as JSON path keys, so this is a
    security boundary: compilation stops before any SQL is built.
    """

    def __init__(self, field_id: Any) -> None:
        self.field_id = field_id
        super().__init__(f'Invalid fieldId "{field_id}"')

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_FIELD_ID",
            "message": str(self),
            "field_id": str(self.field_id),
        }


class InvalidIdentifierError(ResponseFilterError, ValueError):
    """A configured table or column name is not a plain SQL identifier."""

    def __init__(self, setting: str, identifier: str) -> None:
        self.setting = setting
        self.identifier = identifier
        super().__init__(
            f"Setting {setting!r} must be a plain SQL identifier, got {identifier!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_IDENTIFIER",
            "setting": self.setting,
            "identifier": self.identifier,
        }


class UnsupportedBackendError(ResponseFilterError):
    """An unknown storage backend kind was requested."""

    def __init__(self, backend: Any) -> None:
        self.backend = backend
        super().__init__(f"Unsupported storage backend: {backend!r}")
