"""
In-memory search, filtering and pagination for list views.

The full result set is fetched from the backend once, every interactive
filter is recomputed here over that set.
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, TypeVar

from nedc_admin.infrastructure.utils.text_utils import contains_ignore_case, to_float
from nedc_admin.infrastructure.utils.timezone_utils import to_local_date

T = TypeVar("T")

STATUS_ALL = "all"
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_CHOICES = (STATUS_ALL, STATUS_ACTIVE, STATUS_INACTIVE)


@dataclass
class Page(Generic[T]):
    """One page of a list, bounds always inside [1, total_pages]"""
    items: List[T]
    page: int
    per_page: int
    total_items: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def previous_page(self) -> int:
        return max(self.page - 1, 1)

    @property
    def next_page(self) -> int:
        return min(self.page + 1, self.total_pages)


def parse_page(value: Any) -> int:
    """Page number from a query value, 1 when missing or invalid"""
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


def paginate(items: Sequence[T], page: Any, per_page: int) -> Page[T]:
    """
    Slices one page out of items.

    Args:
        items: Full (already filtered) list
        page: Requested page, clamped into [1, total_pages]
        per_page: Page size

    Returns:
        Page with the slice and the clamped page number
    """
    per_page = max(int(per_page), 1)
    total_items = len(items)
    total_pages = max(1, math.ceil(total_items / per_page))
    current = min(parse_page(page), total_pages)

    start = (current - 1) * per_page
    return Page(
        items=list(items[start:start + per_page]),
        page=current,
        per_page=per_page,
        total_items=total_items,
        total_pages=total_pages,
    )


def _values_of(item: Any, fields: Optional[Sequence[str]] = None) -> Iterable[Any]:
    if hasattr(item, "searchable_values"):
        values = item.searchable_values()
    elif isinstance(item, dict):
        values = item
    else:
        values = vars(item)
    if fields is None:
        return values.values()
    return [values.get(name) for name in fields]


def search_items(
    items: Sequence[T],
    term: Optional[str],
    fields: Optional[Sequence[str]] = None,
) -> List[T]:
    """
    Keeps items where any string field contains term (case-insensitive).
    An empty term keeps everything.

    Args:
        items: Full list
        term: Search term
        fields: Field names to look at, every top-level field when None
    """
    if not term:
        return list(items)
    return [
        item for item in items
        if any(contains_ignore_case(value, term) for value in _values_of(item, fields))
    ]


def normalize_status(status: Optional[str]) -> str:
    """Status filter value, 'all' when missing or unknown"""
    if status in (STATUS_ACTIVE, "true"):
        return STATUS_ACTIVE
    if status in (STATUS_INACTIVE, "false"):
        return STATUS_INACTIVE
    return STATUS_ALL


def filter_companies(companies: Sequence[T], search: Optional[str], status: Optional[str]) -> List[T]:
    """Search then active/inactive filter, in that order"""
    filtered = search_items(companies, search)

    status = normalize_status(status)
    if status != STATUS_ALL:
        wanted = status == STATUS_ACTIVE
        filtered = [company for company in filtered if company.is_active == wanted]

    return filtered


def filter_by_date_range(
    items: Sequence[T],
    start: Optional[date],
    end: Optional[date],
    key: Callable[[T], Any],
) -> List[T]:
    """
    Inclusive date-range filter on key(item).
    A no-op unless both bounds are given, items with unparsable dates are dropped.
    """
    if start is None or end is None:
        return list(items)

    result = []
    for item in items:
        item_date = to_local_date(key(item))
        if item_date is not None and start <= item_date <= end:
            result.append(item)
    return result


def sum_amounts(items: Iterable[T], key: Callable[[T], Any]) -> float:
    """Sum of key(item), missing values count as 0"""
    return round(sum(to_float(key(item)) for item in items), 2)


def _item_id(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("_id", item.get("id"))
    return getattr(item, "id", None)


def remove_by_id(items: Sequence[T], item_id: Any) -> List[T]:
    """Copy of items without the one whose id matches"""
    return [item for item in items if _item_id(item) != item_id]


def replace_by_id(items: Sequence[T], replacement: T) -> List[T]:
    """Copy of items with the entry sharing replacement's id swapped in"""
    target = _item_id(replacement)
    return [replacement if _item_id(item) == target else item for item in items]


def append(items: Sequence[T], item: T) -> List[T]:
    return [*items, item]
