"""Today's count, time-of-day split and goal progress."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime

from daily_cigs.domain.logs import GoalProgress, LogEntry, TimeOfDayHistogram
from daily_cigs.domain.preferences import DAILY_GOAL_KEY, LOGS_KEY
from daily_cigs.services.aggregation import (
    goal_progress,
    logs_on_day,
    time_of_day_histogram,
)
from daily_cigs.services.event_store import EventStore, StoreChange


@dataclass
class TodaySummary:
    """Everything the home screen shows for the current day."""

    day: date
    count: int
    logs: list[LogEntry]
    time_of_day: TimeOfDayHistogram
    goal: GoalProgress


@dataclass
class DashboardService:
    """Service backing the home screen."""

    store: EventStore
    clock: Callable[[], datetime] = field(default=datetime.now)

    def get_today(self) -> TodaySummary:
        """Return today's logs and derived figures."""
        now = self.clock()
        return self._summarize(self.store.get_all_logs(), now)

    def add_log(self, entry: LogEntry | None = None) -> TodaySummary:
        """Record a cigarette (now, unless an entry is given) and refresh."""
        logs = self.store.append_log(entry)
        return self._summarize(logs, self.clock())

    def remove_latest(self) -> TodaySummary:
        """Undo the most recent of today's logs, if any."""
        now = self.clock()
        logs = self.store.get_all_logs()
        today_logs = logs_on_day(logs, now.date(), now)
        if today_logs:
            logs = self.store.remove_log(today_logs[-1].id)
        return self._summarize(logs, now)

    def watch(self, on_change: Callable[[TodaySummary], None]) -> Callable[[], None]:
        """Push a fresh summary to ``on_change`` whenever logs or the goal change."""

        def handle(change: StoreChange) -> None:
            if change.key in {LOGS_KEY, DAILY_GOAL_KEY}:
                on_change(self.get_today())

        return self.store.subscribe(handle)

    def _summarize(self, logs: list[LogEntry], now: datetime) -> TodaySummary:
        today_logs = logs_on_day(logs, now.date(), now)
        return TodaySummary(
            day=now.date(),
            count=len(today_logs),
            logs=today_logs,
            time_of_day=time_of_day_histogram(today_logs, now),
            goal=goal_progress(len(today_logs), self.store.get_daily_goal()),
        )
