"""Spending estimates derived from logs and the unit cost."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from daily_cigs.domain.currency import currency_symbol, resolve_currency
from daily_cigs.domain.logs import DailySpending, Period
from daily_cigs.services.aggregation import (
    bucket_by_day,
    derive_spending,
    period_to_date_buckets,
    spending_totals,
    trailing_window_days,
)
from daily_cigs.services.event_store import EventStore


@dataclass
class CostsSummary:
    """Spending series and totals for the costs screen."""

    period: Period
    currency: str
    currency_symbol: str
    unit_cost: Decimal
    chart: list[DailySpending]
    total_spent: Decimal
    total_count: int
    daily_average: Decimal

    @property
    def configured(self) -> bool:
        return self.unit_cost > 0


@dataclass
class CostsService:
    """Service backing the costs screen."""

    store: EventStore
    clock: Callable[[], datetime] = field(default=datetime.now)
    locale_currency: str | None = None

    def get_costs(self, period: Period) -> CostsSummary:
        """Return spending for the trailing window and the current period.

        Without a unit cost there is nothing to price, so the series is empty
        and every total is zero.
        """
        window_days = trailing_window_days(period)
        currency = resolve_currency(self.store.get_currency(), self.locale_currency)
        unit_cost = self.store.get_unit_cost()
        if unit_cost == 0:
            return CostsSummary(
                period=period,
                currency=currency,
                currency_symbol=currency_symbol(currency),
                unit_cost=unit_cost,
                chart=[],
                total_spent=Decimal(0),
                total_count=0,
                daily_average=Decimal(0),
            )

        now = self.clock()
        logs = self.store.get_all_logs()
        chart = derive_spending(bucket_by_day(logs, window_days, now), unit_cost)
        totals = spending_totals(
            derive_spending(period_to_date_buckets(logs, period, now), unit_cost)
        )
        return CostsSummary(
            period=period,
            currency=currency,
            currency_symbol=currency_symbol(currency),
            unit_cost=unit_cost,
            chart=chart,
            total_spent=totals.total_spent,
            total_count=totals.total_count,
            daily_average=totals.daily_average,
        )
