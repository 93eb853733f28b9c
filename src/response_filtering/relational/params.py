"""Positional ``$n`` parameter allocation."""

from __future__ import annotations

from typing import Any


class ParamHelper:
    """Collects bound parameters and hands out their ``$n`` placeholders."""

    def __init__(
        self,
        initial_params: list[Any] | None = None,
        start_index: int | None = None,
    ) -> None:
        self.params: list[Any] = list(initial_params or [])
        self.index: int = (
            start_index if start_index is not None else len(self.params) + 1
        )

    def add(self, value: Any) -> str:
        """Add a parameter and return its placeholder (e.g. ``'$2'``)."""
        self.params.append(value)
        placeholder = f"${self.index}"
        self.index += 1
        return placeholder

    def add_all(self, values: list[Any]) -> list[str]:
        return [self.add(v) for v in values]
