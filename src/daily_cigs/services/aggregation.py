"""Aggregation of cigarette logs into daily, weekly and monthly figures.

Every function here is pure: it takes a snapshot of logs and a reference
instant ``now`` and returns new values without touching storage.

Local time is ``now``'s time zone when ``now`` is aware. With a naive ``now``
the process local zone is used, and naive timestamps are taken as already
local.

Calendar weeks start on Monday. "This week" and "this month" are calendar
periods to date; they are independent of the trailing chart window
(``TRAILING_WINDOW_DAYS``).

Part-of-day boundaries for ``time_of_day_histogram`` are fixed:

* morning: 05:00 to 11:59
* afternoon: 12:00 to 16:59
* evening: 17:00 to 20:59
* night: 21:00 to 04:59
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, tzinfo
from decimal import Decimal, InvalidOperation
from typing import TypeVar

from daily_cigs.domain.errors import InvalidArgument
from daily_cigs.domain.logs import (
    DailyBucket,
    DailySpending,
    GoalProgress,
    LogEntry,
    Period,
    PeriodTotals,
    SpendingTotals,
    TimeOfDayHistogram,
)

TRAILING_WINDOW_DAYS: dict[str, int] = {"week": 7, "month": 30}

MORNING_START_HOUR = 5
AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 17
NIGHT_START_HOUR = 21
DECEMBER = 12

_DatedT = TypeVar("_DatedT", LogEntry, DailyBucket, DailySpending)


def local_day(timestamp: datetime, now: datetime) -> date:
    """Return the local calendar day of a timestamp."""
    return _to_local(timestamp, now.tzinfo).date()


def logs_on_day(logs: Iterable[LogEntry], day: date, now: datetime) -> list[LogEntry]:
    """Return logs whose local calendar day is ``day``, oldest first."""
    matching = [log for log in logs if local_day(log.timestamp, now) == day]
    return sorted(matching, key=lambda log: _to_local(log.timestamp, now.tzinfo))


def bucket_by_day(
    logs: Iterable[LogEntry], days: int, now: datetime
) -> list[DailyBucket]:
    """Count logs per day over the ``days`` calendar days ending today.

    Days without logs get an explicit zero bucket, so the result always has
    exactly ``days`` entries ordered oldest to newest.
    """
    if days < 0:
        raise InvalidArgument(f"days must be non-negative, got {days}")
    today = now.date()
    return _bucket_range(logs, today - timedelta(days=days - 1), days, now)


def trailing_window_days(period: Period) -> int:
    """Return the chart window length used for a period."""
    try:
        return TRAILING_WINDOW_DAYS[period]
    except KeyError:
        raise InvalidArgument(f"Unknown period: {period!r}") from None


def period_start(period: Period, now: datetime) -> date:
    """Return the first day of the calendar week or month containing ``now``."""
    today = now.date()
    if period == "week":
        return today - timedelta(days=today.weekday())
    if period == "month":
        return today.replace(day=1)
    raise InvalidArgument(f"Unknown period: {period!r}")


def filter_by_period(
    items: Iterable[_DatedT], period: Period, now: datetime
) -> list[_DatedT]:
    """Keep buckets or logs that fall in the current calendar week or month."""
    start = period_start(period, now)
    if period == "week":
        end = start + timedelta(days=6)
    else:
        end = _next_month(start) - timedelta(days=1)
    return [item for item in items if start <= _item_day(item, now) <= end]


def period_to_date_buckets(
    logs: Iterable[LogEntry], period: Period, now: datetime
) -> list[DailyBucket]:
    """Return buckets from the start of the calendar period through today."""
    start = period_start(period, now)
    return _bucket_range(logs, start, (now.date() - start).days + 1, now)


def period_change(logs: Sequence[LogEntry], period: Period, now: datetime) -> int:
    """Compare this period to date with the same stretch of the previous one.

    The previous stretch covers as many days as have elapsed in the current
    period, clamped to the previous month's length.
    """
    start = period_start(period, now)
    elapsed = (now.date() - start).days + 1
    if period == "week":
        previous_start = start - timedelta(days=7)
        span = elapsed
    else:
        previous_start = (start - timedelta(days=1)).replace(day=1)
        span = min(elapsed, (start - previous_start).days)
    current = aggregate(_bucket_range(logs, start, elapsed, now)).total
    previous = aggregate(_bucket_range(logs, previous_start, span, now)).total
    return current - previous


def aggregate(period_buckets: Sequence[DailyBucket | DailySpending]) -> PeriodTotals:
    """Sum counts and average them per bucket."""
    total = sum(bucket.count for bucket in period_buckets)
    if not period_buckets:
        return PeriodTotals(total=0, daily_average=0.0)
    return PeriodTotals(total=total, daily_average=total / len(period_buckets))


def derive_spending(
    daily_buckets: Iterable[DailyBucket], unit_cost: Decimal | int | str
) -> list[DailySpending]:
    """Price each bucket at ``unit_cost`` per cigarette, without rounding."""
    try:
        cost = Decimal(unit_cost)
    except InvalidOperation:
        message = f"unit_cost must be a number, got {unit_cost!r}"
        raise InvalidArgument(message) from None
    if not cost.is_finite() or cost < 0:
        raise InvalidArgument(f"unit_cost must be non-negative, got {unit_cost}")
    return [
        DailySpending(day=bucket.day, count=bucket.count, amount=bucket.count * cost)
        for bucket in daily_buckets
    ]


def spending_totals(spending: Sequence[DailySpending]) -> SpendingTotals:
    """Sum money and counts over spending rows."""
    total_spent = sum((row.amount for row in spending), Decimal(0))
    total_count = sum(row.count for row in spending)
    daily_average = total_spent / len(spending) if spending else Decimal(0)
    return SpendingTotals(
        total_spent=total_spent,
        total_count=total_count,
        daily_average=daily_average,
    )


def part_of_day(hour: int) -> str:
    """Name the part of the day an hour (0-23) belongs to."""
    if MORNING_START_HOUR <= hour < AFTERNOON_START_HOUR:
        return "morning"
    if AFTERNOON_START_HOUR <= hour < EVENING_START_HOUR:
        return "afternoon"
    if EVENING_START_HOUR <= hour < NIGHT_START_HOUR:
        return "evening"
    return "night"


def time_of_day_histogram(
    logs: Iterable[LogEntry], now: datetime | None = None
) -> TimeOfDayHistogram:
    """Count logs by part of the day using their local hour."""
    tz = now.tzinfo if now is not None else None
    counts = Counter(part_of_day(_to_local(log.timestamp, tz).hour) for log in logs)
    return TimeOfDayHistogram(
        morning=counts["morning"],
        afternoon=counts["afternoon"],
        evening=counts["evening"],
        night=counts["night"],
    )


def goal_progress(count: int, daily_goal: int) -> GoalProgress:
    """Measure a day's count against the daily goal (0 means no goal)."""
    if daily_goal <= 0:
        return GoalProgress(goal=0, count=count, remaining=None, exceeded=False)
    return GoalProgress(
        goal=daily_goal,
        count=count,
        remaining=max(daily_goal - count, 0),
        exceeded=count > daily_goal,
    )


def _bucket_range(
    logs: Iterable[LogEntry], start: date, days: int, now: datetime
) -> list[DailyBucket]:
    counts = Counter(local_day(log.timestamp, now) for log in logs)
    window = [start + timedelta(days=offset) for offset in range(days)]
    return [DailyBucket(day=day, count=counts.get(day, 0)) for day in window]


def _item_day(item: LogEntry | DailyBucket | DailySpending, now: datetime) -> date:
    if isinstance(item, LogEntry):
        return local_day(item.timestamp, now)
    return item.day


def _next_month(first_day: date) -> date:
    if first_day.month == DECEMBER:
        return first_day.replace(year=first_day.year + 1, month=1)
    return first_day.replace(month=first_day.month + 1)


def _to_local(timestamp: datetime, tz: tzinfo | None) -> datetime:
    if tz is not None:
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=tz)
        return timestamp.astimezone(tz)
    if timestamp.tzinfo is None:
        return timestamp
    return timestamp.astimezone().replace(tzinfo=None)
