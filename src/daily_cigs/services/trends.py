"""Trend chart series and calendar period statistics."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from daily_cigs.domain.logs import DailyBucket, Period
from daily_cigs.services.aggregation import (
    aggregate,
    bucket_by_day,
    period_change,
    period_to_date_buckets,
    trailing_window_days,
)
from daily_cigs.services.event_store import EventStore


@dataclass
class TrendsSummary:
    """Chart series over the trailing window plus this period's statistics."""

    period: Period
    chart: list[DailyBucket]
    total: int
    daily_average: float
    change_from_last_period: int


@dataclass
class TrendsService:
    """Service backing the trends screen."""

    store: EventStore
    clock: Callable[[], datetime] = field(default=datetime.now)

    def get_trends(self, period: Period) -> TrendsSummary:
        """Return the chart series and totals for the current week or month."""
        now = self.clock()
        logs = self.store.get_all_logs()
        chart = bucket_by_day(logs, trailing_window_days(period), now)
        totals = aggregate(period_to_date_buckets(logs, period, now))
        return TrendsSummary(
            period=period,
            chart=chart,
            total=totals.total,
            daily_average=totals.daily_average,
            change_from_last_period=period_change(logs, period, now),
        )
