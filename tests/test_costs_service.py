"""Tests for the costs service."""

from datetime import datetime
from decimal import Decimal

from daily_cigs.domain.logs import LogEntry
from daily_cigs.services.costs import CostsService
from daily_cigs.services.event_store import EventStore
from tests.conftest import MutableClock


def _seed(store: EventStore) -> None:
    for log_id, timestamp in [
        ("oct-09", datetime(2026, 10, 9, 9, 0)),
        ("oct-13", datetime(2026, 10, 13, 9, 0)),
        ("oct-14a", datetime(2026, 10, 14, 9, 0)),
        ("oct-14b", datetime(2026, 10, 14, 13, 0)),
    ]:
        store.append_log(LogEntry(id=log_id, timestamp=timestamp))


def test_costs_without_unit_cost_are_empty(
    store: EventStore, clock: MutableClock
) -> None:
    _seed(store)

    summary = CostsService(store, clock=clock).get_costs("week")

    assert not summary.configured
    assert summary.chart == []
    assert summary.total_spent == 0
    assert summary.total_count == 0
    assert summary.currency == "USD"
    assert summary.currency_symbol == "$"


def test_week_costs(store: EventStore, clock: MutableClock) -> None:
    _seed(store)
    store.set_unit_cost("0.40")
    store.set_currency("EUR")

    summary = CostsService(store, clock=clock).get_costs("week")

    assert summary.configured
    assert summary.currency == "EUR"
    assert summary.currency_symbol == "€"
    assert len(summary.chart) == 7
    assert summary.chart[-1].amount == Decimal("0.80")
    assert summary.total_spent == Decimal("1.20")
    assert summary.total_count == 3
    assert summary.daily_average == Decimal("0.40")


def test_month_costs_cover_month_to_date(
    store: EventStore, clock: MutableClock
) -> None:
    _seed(store)
    store.set_unit_cost(1)

    summary = CostsService(store, clock=clock).get_costs("month")

    assert len(summary.chart) == 30
    assert summary.total_count == 4
    assert summary.total_spent == Decimal(4)


def test_currency_falls_back_to_locale(store: EventStore, clock: MutableClock) -> None:
    store.set_unit_cost(1)

    summary = CostsService(store, clock=clock, locale_currency="gbp").get_costs(
        "week"
    )

    assert summary.currency == "GBP"
    assert summary.currency_symbol == "£"
