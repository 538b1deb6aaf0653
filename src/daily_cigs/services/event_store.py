"""Event store for cigarette logs and scalar preferences."""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Protocol

from daily_cigs.domain.currency import normalize_currency_code
from daily_cigs.domain.errors import (
    InvalidArgument,
    StorageReadError,
    StorageWriteError,
)
from daily_cigs.domain.logs import LogEntry
from daily_cigs.domain.preferences import (
    CURRENCY_KEY,
    DAILY_GOAL_KEY,
    HAS_SEEN_WELCOME_KEY,
    LOGS_KEY,
    NOTIFICATIONS_KEY,
    PREFERENCE_DEFAULTS,
    UNIT_COST_KEY,
    Preferences,
)

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistence interface holding one string value per key."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value for the key."""

    def remove_item(self, key: str) -> None:
        """Delete the key if present."""


@dataclass(frozen=True)
class StoreChange:
    """Notification sent to observers after a successful write."""

    key: str
    value: object


StoreObserver = Callable[[StoreChange], None]


@dataclass
class EventStore:
    """CRUD over the log collection and preferences, with change notification."""

    backend: KeyValueStore
    clock: Callable[[], datetime] = datetime.now
    _observers: list[StoreObserver] = field(
        default_factory=list, init=False, repr=False
    )

    def get_all_logs(self) -> list[LogEntry]:
        """Return every persisted log; unreadable data degrades to an empty list."""
        raw = self._read(LOGS_KEY)
        if raw is None:
            return []
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Stored logs are not valid JSON; treating as empty")
            return []
        if not isinstance(payload, list):
            _logger.warning("Stored logs are not a list; treating as empty")
            return []

        logs: list[LogEntry] = []
        seen: set[str] = set()
        for item in payload:
            entry = _parse_entry(item)
            if entry is None:
                _logger.warning("Skipping malformed log entry: %r", item)
                continue
            if entry.id in seen:
                continue
            seen.add(entry.id)
            logs.append(entry)
        return logs

    def append_log(self, entry: LogEntry | None = None) -> list[LogEntry]:
        """Persist a new log, creating one stamped now when none is given."""
        logs = self.get_all_logs()
        existing_ids = {log.id for log in logs}
        if entry is None:
            timestamp = self.clock()
            entry = LogEntry(
                id=_new_log_id(timestamp, existing_ids), timestamp=timestamp
            )
        if entry.id in existing_ids:
            return logs
        updated = [*logs, entry]
        self._write_logs(updated)
        return updated

    def remove_log(self, log_id: str) -> list[LogEntry]:
        """Remove the log with the given id; unknown ids are ignored."""
        logs = self.get_all_logs()
        updated = [log for log in logs if log.id != log_id]
        if len(updated) == len(logs):
            return logs
        self._write_logs(updated)
        return updated

    def get_preference(self, key: str) -> object:
        """Return a preference value, or its default when unset or unreadable."""
        default = _default_for(key)
        raw = self._read(key)
        if raw is None:
            return default
        value = _PARSERS[key](raw)
        if value is None and default is not None:
            _logger.warning("Ignoring unparsable %s value: %r", key, raw)
            return default
        return value

    def set_preference(self, key: str, value: object) -> None:
        """Validate and persist a preference value."""
        _default_for(key)
        serialized = _SERIALIZERS[key](value)
        if serialized is None:
            self._remove(key)
        else:
            self._write(key, serialized)
        self._notify(StoreChange(key=key, value=value))

    def get_daily_goal(self) -> int:
        return self.get_preference(DAILY_GOAL_KEY)  # type: ignore[return-value]

    def set_daily_goal(self, goal: int) -> None:
        self.set_preference(DAILY_GOAL_KEY, goal)

    def get_unit_cost(self) -> Decimal:
        return self.get_preference(UNIT_COST_KEY)  # type: ignore[return-value]

    def set_unit_cost(self, cost: Decimal | int | str) -> None:
        self.set_preference(UNIT_COST_KEY, cost)

    def get_currency(self) -> str | None:
        return self.get_preference(CURRENCY_KEY)  # type: ignore[return-value]

    def set_currency(self, currency: str | None) -> None:
        self.set_preference(CURRENCY_KEY, currency)

    def has_seen_onboarding(self) -> bool:
        return self.get_preference(HAS_SEEN_WELCOME_KEY)  # type: ignore[return-value]

    def mark_onboarding_seen(self) -> None:
        self.set_preference(HAS_SEEN_WELCOME_KEY, True)

    def notifications_enabled(self) -> bool:
        return self.get_preference(NOTIFICATIONS_KEY)  # type: ignore[return-value]

    def set_notifications_enabled(self, enabled: bool) -> None:
        self.set_preference(NOTIFICATIONS_KEY, enabled)

    def get_preferences(self) -> Preferences:
        """Return a snapshot of every preference."""
        return Preferences(
            daily_goal=self.get_daily_goal(),
            unit_cost=self.get_unit_cost(),
            currency=self.get_currency(),
            has_seen_onboarding=self.has_seen_onboarding(),
            notifications_enabled=self.notifications_enabled(),
        )

    def subscribe(self, observer: StoreObserver) -> Callable[[], None]:
        """Register an observer for store changes and return its unsubscriber."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _write_logs(self, logs: list[LogEntry]) -> None:
        payload = [
            {"id": log.id, "timestamp": log.timestamp.isoformat()} for log in logs
        ]
        self._write(LOGS_KEY, json.dumps(payload))
        self._notify(StoreChange(key=LOGS_KEY, value=list(logs)))

    def _read(self, key: str) -> str | None:
        try:
            return self.backend.get_item(key)
        except StorageReadError:
            _logger.warning("Failed to read %s from storage", key, exc_info=True)
            return None

    def _write(self, key: str, value: str) -> None:
        try:
            self.backend.set_item(key, value)
        except StorageWriteError:
            _logger.exception("Failed to write %s to storage", key)
            raise

    def _remove(self, key: str) -> None:
        try:
            self.backend.remove_item(key)
        except StorageWriteError:
            _logger.exception("Failed to remove %s from storage", key)
            raise

    def _notify(self, change: StoreChange) -> None:
        for observer in list(self._observers):
            try:
                observer(change)
            except Exception:
                _logger.exception("Store observer failed for %s", change.key)


def _new_log_id(timestamp: datetime, existing_ids: set[str]) -> str:
    candidate = int(timestamp.timestamp() * 1000)
    while str(candidate) in existing_ids:
        candidate += 1
    return str(candidate)


def _parse_entry(item: object) -> LogEntry | None:
    if not isinstance(item, dict):
        return None
    log_id = item.get("id")
    raw_timestamp = item.get("timestamp")
    if not isinstance(log_id, str) or not log_id:
        return None
    if not isinstance(raw_timestamp, str):
        return None
    try:
        timestamp = datetime.fromisoformat(raw_timestamp)
    except ValueError:
        return None
    return LogEntry(id=log_id, timestamp=timestamp)


def _default_for(key: str) -> object:
    if key not in PREFERENCE_DEFAULTS:
        raise InvalidArgument(f"Unknown preference: {key!r}")
    return PREFERENCE_DEFAULTS[key]


def _parse_goal(raw: str) -> int | None:
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


def _parse_cost(raw: str) -> Decimal | None:
    try:
        value = Decimal(raw.strip())
    except InvalidOperation:
        return None
    return value if value.is_finite() and value >= 0 else None


def _parse_flag(raw: str) -> bool:
    return raw.strip().lower() == "true"


def _serialize_goal(value: object) -> str:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgument(f"Daily goal must be a non-negative integer: {value!r}")
    return str(value)


def _serialize_cost(value: object) -> str:
    if isinstance(value, bool) or not isinstance(value, Decimal | int | float | str):
        raise InvalidArgument(f"Unit cost must be a number: {value!r}")
    try:
        cost = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidArgument(f"Unit cost must be a number: {value!r}") from None
    if not cost.is_finite() or cost < 0:
        raise InvalidArgument(f"Unit cost must be non-negative: {value!r}")
    return str(cost)


def _serialize_currency(value: object) -> str | None:
    if value is None:
        return None
    code = normalize_currency_code(value) if isinstance(value, str) else None
    if code is None:
        raise InvalidArgument(f"Currency must be an ISO 4217 code: {value!r}")
    return code


def _serialize_welcome(value: object) -> str | None:
    if not isinstance(value, bool):
        raise InvalidArgument(f"Onboarding flag must be a boolean: {value!r}")
    return "true" if value else None


def _serialize_flag(value: object) -> str:
    if not isinstance(value, bool):
        raise InvalidArgument(f"Flag must be a boolean: {value!r}")
    return "true" if value else "false"


_PARSERS: dict[str, Callable[[str], object]] = {
    DAILY_GOAL_KEY: _parse_goal,
    UNIT_COST_KEY: _parse_cost,
    CURRENCY_KEY: normalize_currency_code,
    HAS_SEEN_WELCOME_KEY: _parse_flag,
    NOTIFICATIONS_KEY: _parse_flag,
}

_SERIALIZERS: dict[str, Callable[[object], str | None]] = {
    DAILY_GOAL_KEY: _serialize_goal,
    UNIT_COST_KEY: _serialize_cost,
    CURRENCY_KEY: _serialize_currency,
    HAS_SEEN_WELCOME_KEY: _serialize_welcome,
    NOTIFICATIONS_KEY: _serialize_flag,
}
