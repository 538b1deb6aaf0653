"""Domain models for cigarette logs and their aggregates."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Literal

Period = Literal["week", "month"]


@dataclass(frozen=True)
class LogEntry:
    """A single recorded cigarette."""

    id: str
    timestamp: datetime


@dataclass(frozen=True)
class DailyBucket:
    """Number of logs on one local calendar day."""

    day: date
    count: int


@dataclass(frozen=True)
class DailySpending:
    """Money spent on one local calendar day."""

    day: date
    count: int
    amount: Decimal


@dataclass(frozen=True)
class PeriodTotals:
    """Total and per-day average over a run of buckets."""

    total: int
    daily_average: float


@dataclass(frozen=True)
class SpendingTotals:
    """Money and log totals over a run of spending rows."""

    total_spent: Decimal
    total_count: int
    daily_average: Decimal


@dataclass(frozen=True)
class TimeOfDayHistogram:
    """Log counts split by part of the day."""

    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    night: int = 0


@dataclass(frozen=True)
class GoalProgress:
    """Today's count measured against the daily goal."""

    goal: int
    count: int
    remaining: int | None
    exceeded: bool
