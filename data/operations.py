from typing import Iterable, List

from .models import DATE_FILTER_ALL, Order, SortDirection
from utils.helpers import truncate_date

# Filter / sort engine. Pure functions over the fetched collection; inputs
# are never mutated.

def filter_by_date(orders: Iterable[Order], date_filter: str) -> List[Order]:
    """Keep orders created on the given calendar date (reference zone)."""
    if date_filter == DATE_FILTER_ALL:
        return list(orders)
    return [order for order in orders if truncate_date(order.created_at) == date_filter]

def sort_by_created(orders: Iterable[Order], direction) -> List[Order]:
    """Stable sort by creation time.

    Equal timestamps keep their original relative order in both directions,
    so "newest" is not simply the reverse of "oldest".
    """
    direction = SortDirection(direction)
    if direction == SortDirection.NEWEST:
        return sorted(orders, key=lambda o: o.created_at.timestamp(), reverse=True)
    return sorted(orders, key=lambda o: o.created_at.timestamp())

def filter_and_sort(orders: Iterable[Order], date_filter: str, direction) -> List[Order]:
    """Derive the displayed view from the full collection."""
    return sort_by_created(filter_by_date(orders, date_filter), direction)

def available_dates(orders: Iterable[Order]) -> List[str]:
    """Distinct creation dates across the collection, in first-seen order."""
    seen = {}
    for order in orders:
        seen.setdefault(truncate_date(order.created_at), None)
    return list(seen)
