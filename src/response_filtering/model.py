"""
Filter and record models.

``ResponseFilter`` is the backend-agnostic predicate supplied by the API
layer.  It carries no behaviour: the compilers and the memory evaluator
decide what each operator means.  ``FormResponse`` is the record shape
returned by both storage backends.
"""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .coercion import to_datetime
from .operators import FilterOperator, resolve_operator

if TYPE_CHECKING:
    from collections.abc import Mapping


def _operand_to_str(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class NumberRange(BaseModel):
    """Inclusive numeric bounds for ``BETWEEN``; either bound may be absent."""

    model_config = ConfigDict(frozen=True)

    min: float | None = None
    max: float | None = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def _lenient_bound(cls, value: Any) -> float | None:
        # Partially filled range inputs arrive as "" or garbage.
        if value is None or isinstance(value, bool) or value == "":
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        return number if math.isfinite(number) else None

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None


class DateRange(BaseModel):
    """Inclusive date bounds for ``DATE_BETWEEN`` (``from`` / ``to``)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str | None = Field(default=None, alias="from")
    to: str | None = None

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> str | None:
        text = _operand_to_str(value)
        return text or None


class ResponseFilter(BaseModel):
    """
    One user-authored predicate over a response data field.

    Accepts the camelCase API shape::

        ResponseFilter.model_validate(
            {"fieldId": "color", "operator": "CONTAINS", "value": "Red"}
        )

    At most one of ``value`` / ``values`` / ``number_range`` /
    ``date_range`` is meaningful for a given operator.  A filter whose
    required operand is missing compiles to no condition.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    field_id: str = Field(alias="fieldId")
    operator: str
    value: str | None = None
    values: tuple[str, ...] | None = None
    number_range: NumberRange | None = Field(default=None, alias="numberRange")
    date_range: DateRange | None = Field(default=None, alias="dateRange")

    @field_validator("operator", mode="before")
    @classmethod
    def _operator_to_str(cls, value: Any) -> Any:
        if isinstance(value, FilterOperator):
            return value.value
        return value

    @field_validator("value", mode="before")
    @classmethod
    def _value_to_str(cls, value: Any) -> str | None:
        return _operand_to_str(value)

    @field_validator("values", mode="before")
    @classmethod
    def _values_to_str(cls, value: Any) -> tuple[str, ...] | None:
        if value is None:
            return None
        if isinstance(value, str):
            return (value,)
        if not isinstance(value, Iterable):
            value = (value,)
        return tuple(
            text for text in (_operand_to_str(v) for v in value) if text is not None
        )

    @property
    def resolved_operator(self) -> FilterOperator | None:
        """The operator as a ``FilterOperator``; ``None`` when unknown."""
        return resolve_operator(self.operator)


def _decode_json(value: Any) -> Any:
    """Decode JSON text; text that is not JSON is returned unchanged."""
    if isinstance(value, str | bytes):
        try:
            return json.loads(value)
        except ValueError:
            return value
    return value


class FormResponse(BaseModel):
    """A stored form response as returned by either storage backend."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    form_id: str = Field(alias="formId")
    data: dict[str, Any] = Field(default_factory=dict)
    metadata: Any = None
    submitted_at: datetime = Field(alias="submittedAt")

    @field_validator("id", "form_id", mode="before")
    @classmethod
    def _id_to_str(cls, value: Any) -> Any:
        return value if value is None else str(value)

    @field_validator("data", mode="before")
    @classmethod
    def _decode_data(cls, value: Any) -> Any:
        decoded = _decode_json(value)
        return decoded if isinstance(decoded, dict) else {}

    def field_value(self, field_id: str) -> Any:
        return self.data.get(field_id)

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> FormResponse:
        """Build a record from a raw Mongo document."""
        return cls(
            id=doc.get("_id", doc.get("id")),
            form_id=doc.get("formId"),
            data=doc.get("data") or {},
            metadata=doc.get("metadata"),
            submitted_at=_submitted_at(doc.get("submittedAt")),
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> FormResponse:
        """Build a record from a relational row keyed by the canonical names."""
        values = dict(row)
        # jsonb columns arrive as JSON text.
        values["metadata"] = _decode_json(values.get("metadata"))
        return cls.model_validate(values)


def _submitted_at(raw: Any) -> datetime:
    # Raw documents may carry BSON dates, extended JSON, ISO strings or
    # epoch milliseconds.
    if isinstance(raw, dict) and "$date" in raw:
        raw = raw["$date"]
        if isinstance(raw, dict) and "$numberLong" in raw:
            raw = raw["$numberLong"]
    parsed = to_datetime(raw)
    if parsed is None:
        return datetime.now(timezone.utc)
    return parsed


@dataclass(frozen=True)
class ResponsePage:
    """One page of a response listing."""

    data: list[FormResponse] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase API payload."""
        return {
            "data": [r.model_dump(by_alias=True) for r in self.data],
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "totalPages": self.total_pages,
        }
