"""
Apply response filters to already-loaded records.

Used for predicates the document store cannot express (date operators),
for ``OR`` combination and for dynamic-field sorting, where the full
candidate set has to be evaluated in process.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from ..operators import FilterLogic, resolve_logic
from .operators import build_default_registry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..model import ResponseFilter
    from .evaluator import MemoryOperator, MemoryOperatorRegistry

logger = logging.getLogger(__name__)

R = TypeVar("R")

_DEFAULT_REGISTRY = build_default_registry()


def response_data(record: Any) -> Mapping[str, Any]:
    """
    Return the field mapping of *record*.

    Accepts ``FormResponse`` instances, raw mappings with ``data`` (or the
    legacy ``responseData`` key) and JSON text payloads.  Anything else has
    no fields.
    """
    if isinstance(record, Mapping):
        data = record.get("data")
        if data is None:
            data = record.get("responseData")
    else:
        data = getattr(record, "data", None)
    if isinstance(data, str | bytes):
        try:
            data = json.loads(data)
        except ValueError:
            return {}
    return data if isinstance(data, Mapping) else {}


def _active(
    filters: Iterable[ResponseFilter],
    registry: MemoryOperatorRegistry,
) -> list[tuple[ResponseFilter, MemoryOperator]]:
    # Unknown operators and missing operands impose no condition under
    # either logic, so they are left out before combining.
    active = []
    for f in filters:
        op = f.resolved_operator
        strategy = registry.get(op) if op is not None else None
        if strategy is None:
            logger.warning(
                "Unsupported filter operator %r on field %s; skipping",
                f.operator,
                f.field_id,
            )
            continue
        if strategy.has_operand(f):
            active.append((f, strategy))
    return active


def matches_filters(
    record: Any,
    filters: Sequence[ResponseFilter],
    filter_logic: FilterLogic | str = FilterLogic.AND,
    registry: MemoryOperatorRegistry | None = None,
) -> bool:
    """Evaluate *filters* against a single record."""
    return bool(
        apply_response_filters([record], filters, filter_logic, registry=registry)
    )


def apply_response_filters(
    records: Iterable[R],
    filters: Sequence[ResponseFilter] | None,
    filter_logic: FilterLogic | str = FilterLogic.AND,
    registry: MemoryOperatorRegistry | None = None,
) -> list[R]:
    """
    Return the records satisfying *filters*, in their original order.

    Pure and synchronous.  Malformed stored values make a predicate false;
    an unknown operator or a missing operand imposes no condition.
    """
    items = list(records)
    active = _active(filters or (), registry or _DEFAULT_REGISTRY)
    if not active:
        return items

    combine = any if resolve_logic(filter_logic) is FilterLogic.OR else all
    selected = [
        record
        for record in items
        if combine(
            strategy.evaluate(response_data(record).get(f.field_id), f)
            for f, strategy in active
        )
    ]
    logger.debug(
        "Memory filter kept %d of %d record(s) (%d active filter(s))",
        len(selected),
        len(items),
        len(active),
    )
    return selected
