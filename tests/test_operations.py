from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_order
from data import operations
from data.models import SortDirection
from data.operations import available_dates, filter_and_sort


@pytest.fixture
def orders():
    return [
        make_order("A", "2024-01-01T10:00:00Z"),
        make_order("B", "2024-01-01T09:00:00Z", status="Delivered"),
        make_order("C", "2024-01-02T08:30:00Z"),
        make_order("D", "2024-01-02T23:59:59Z"),
        make_order("E", "2024-01-01T10:00:00Z"),
    ]


def _ids(orders):
    return [o.id for o in orders]


def test_all_newest_scenario():
    a = make_order("A", "2024-01-01T10:00:00Z", status="Pending")
    b = make_order("B", "2024-01-01T09:00:00Z", status="Delivered")
    assert _ids(filter_and_sort([b, a], "all", "newest")) == ["A", "B"]


@pytest.mark.parametrize("direction", ["newest", "oldest"])
def test_all_is_permutation(orders, direction):
    result = filter_and_sort(orders, "all", direction)
    assert sorted(_ids(result)) == sorted(_ids(orders))


def test_date_filter_keeps_exactly_that_day(orders):
    result = filter_and_sort(orders, "2024-01-02", "newest")
    assert _ids(result) == ["D", "C"]
    assert all(o.created_at.date().isoformat() == "2024-01-02" for o in result)


def test_unknown_date_yields_nothing(orders):
    assert filter_and_sort(orders, "2023-12-31", "oldest") == []


def test_newest_is_monotonic_and_stable(orders):
    result = filter_and_sort(orders, "all", SortDirection.NEWEST)
    stamps = [o.created_at for o in result]
    assert all(a >= b for a, b in zip(stamps, stamps[1:]))
    # A and E share a timestamp; input order is kept
    assert _ids(result).index("A") < _ids(result).index("E")


def test_oldest_is_monotonic_and_stable(orders):
    result = filter_and_sort(orders, "all", SortDirection.OLDEST)
    assert _ids(result) == ["B", "A", "E", "C", "D"]


def test_input_not_mutated_and_idempotent(orders):
    before = list(orders)
    first = filter_and_sort(orders, "2024-01-01", "oldest")
    second = filter_and_sort(orders, "2024-01-01", "oldest")
    assert first == second
    assert orders == before


def test_bad_direction_rejected(orders):
    with pytest.raises(ValueError):
        filter_and_sort(orders, "all", "sideways")


def test_available_dates_are_distinct():
    orders = [
        make_order("1", "2024-01-01T08:00:00Z"),
        make_order("2", "2024-01-02T08:00:00Z"),
        make_order("3", "2024-01-01T18:00:00Z"),
        make_order("4", "2024-01-02T18:00:00Z"),
    ]
    dates = available_dates(orders)
    assert sorted(dates) == ["2024-01-01", "2024-01-02"]
    assert len(dates) == len(set(dates))


def test_available_dates_keep_first_seen_order():
    orders = [
        make_order("1", "2024-03-05T08:00:00Z"),
        make_order("2", "2024-01-02T08:00:00Z"),
        make_order("3", "2024-03-05T09:00:00Z"),
    ]
    assert available_dates(orders) == ["2024-03-05", "2024-01-02"]


def test_filter_and_options_share_reference_zone(monkeypatch):
    # 20:00 UTC is already the next day at UTC+5:30
    ist = timezone(timedelta(hours=5, minutes=30))
    monkeypatch.setattr("utils.helpers.REFERENCE_TZ", ist)
    order = make_order("late", "2024-01-01T20:00:00Z")

    assert available_dates([order]) == ["2024-01-02"]
    assert _ids(filter_and_sort([order], "2024-01-02", "newest")) == ["late"]
    assert filter_and_sort([order], "2024-01-01", "newest") == []


def test_naive_timestamps_read_as_utc():
    order = make_order("n", "2024-01-01T23:30:00")
    assert order.created_at.tzinfo is not None
    assert order.created_at == datetime(2024, 1, 1, 23, 30, tzinfo=timezone.utc)
    assert operations.available_dates([order]) == ["2024-01-01"]
