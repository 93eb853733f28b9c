"""Sort and pagination resolution for response listings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from .coercion import lower_text, to_number
from .sanitizer import is_safe_field_id
from .settings import DEFAULT_SETTINGS, ListingSettings

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import FormResponse

SORT_ASC = "asc"
SORT_DESC = "desc"


class ListingOptions(NamedTuple):
    """Validated page, page size and ordering of one listing request."""

    page: int
    limit: int
    sort_by: str
    sort_order: str
    dynamic_field: str | None = None
    numeric_sort: bool = False

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def descending(self) -> bool:
        return self.sort_order == SORT_DESC

    @property
    def is_dynamic(self) -> bool:
        return self.dynamic_field is not None


def _clamp_page(page: Any) -> int:
    try:
        return max(1, int(page))
    except (TypeError, ValueError):
        return 1


def _clamp_limit(limit: Any, settings: ListingSettings) -> int:
    if limit is None:
        return settings.default_limit
    try:
        return min(settings.max_limit, max(1, int(limit)))
    except (TypeError, ValueError):
        return settings.default_limit


def resolve_listing_options(
    page: Any = 1,
    limit: Any = None,
    sort_by: str | None = None,
    sort_order: str | None = None,
    settings: ListingSettings = DEFAULT_SETTINGS,
) -> ListingOptions:
    """
    Clamp raw listing parameters into a usable ``ListingOptions``.

    Never raises: an invalid page becomes 1, an invalid limit the default,
    an unknown sort key the default key and an unknown order the default
    order.  ``data.<fieldId>`` selects a dynamic field only when the field
    id would pass the identifier sanitizer.
    """
    dynamic_field = None
    resolved_sort = settings.default_sort_by
    if sort_by in settings.sortable_fields:
        resolved_sort = sort_by
    elif sort_by and sort_by.startswith(settings.dynamic_sort_prefix):
        candidate = sort_by[len(settings.dynamic_sort_prefix) :]
        if is_safe_field_id(candidate):
            resolved_sort = sort_by
            dynamic_field = candidate

    order = (sort_order or "").lower()
    if order not in (SORT_ASC, SORT_DESC):
        order = settings.default_sort_order

    return ListingOptions(
        page=_clamp_page(page),
        limit=_clamp_limit(limit, settings),
        sort_by=resolved_sort,
        sort_order=order,
        dynamic_field=dynamic_field,
        numeric_sort=settings.numeric_dynamic_sort,
    )


# ---------------------------------------------------------------------------
# In-memory ordering
# ---------------------------------------------------------------------------


def _text_key(value: Any) -> tuple[bool, str]:
    text = lower_text(value)
    return (text is not None, text or "")


def _numeric_key(value: Any) -> tuple[bool, bool, float, str]:
    text = lower_text(value)
    number = to_number(text) if text is not None else None
    return (
        text is not None,
        number is None,
        number if number is not None else 0.0,
        text or "",
    )


def sort_responses(
    records: Iterable[FormResponse],
    options: ListingOptions,
) -> list[FormResponse]:
    """
    Order records the way the relational ``ORDER BY`` does.

    Dynamic fields compare as lower-cased text (``"10" < "15" < "5"``)
    unless ``options.numeric_sort`` is set, in which case numeric values
    sort by value ahead of non-numeric text.  Missing values come first
    ascending and last descending.
    """
    items = list(records)
    if options.dynamic_field is not None:
        field_id = options.dynamic_field
        key = _numeric_key if options.numeric_sort else _text_key
        return sorted(
            items,
            key=lambda r: key(r.field_value(field_id)),
            reverse=options.descending,
        )
    if options.sort_by == "id":
        return sorted(items, key=lambda r: r.id, reverse=options.descending)
    return sorted(items, key=lambda r: r.submitted_at, reverse=options.descending)


def paginate(
    records: Sequence[FormResponse],
    options: ListingOptions,
) -> list[FormResponse]:
    """Slice one page out of an already ordered sequence."""
    return list(records[options.skip : options.skip + options.limit])
