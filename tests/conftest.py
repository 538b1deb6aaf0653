"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

import pytest

from daily_cigs.config import Settings
from daily_cigs.containers import AppContainer
from daily_cigs.domain.errors import StorageReadError, StorageWriteError
from daily_cigs.services.costs import CostsService
from daily_cigs.services.dashboard import DashboardService
from daily_cigs.services.event_store import EventStore, KeyValueStore
from daily_cigs.services.onboarding import OnboardingService
from daily_cigs.services.trends import TrendsService

# A Wednesday; its calendar week starts on Monday 2026-10-12.
NOW = datetime(2026, 10, 14, 15, 30)


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store for tests."""

    items: dict[str, str] = field(default_factory=dict)
    writes: list[str] = field(default_factory=list)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value
        self.writes.append(key)

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)
        self.writes.append(key)


@dataclass
class FailingKeyValueStore(InMemoryKeyValueStore):
    """Key-value store that fails reads and/or writes on demand."""

    fail_reads: bool = False
    fail_writes: bool = False

    def get_item(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageReadError(f"cannot read {key}")
        return super().get_item(key)

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"cannot write {key}")
        super().set_item(key, value)

    def remove_item(self, key: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"cannot remove {key}")
        super().remove_item(key)


@dataclass
class MutableClock:
    """Clock returning a settable instant."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(backend: InMemoryKeyValueStore, clock: MutableClock) -> EventStore:
    return EventStore(backend=backend, clock=clock)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_path=tmp_path / "storage.json")


def build_test_container(
    settings: Settings,
    store: EventStore,
    clock: Callable[[], datetime],
) -> AppContainer:
    return AppContainer(
        settings=settings,
        store=store,
        dashboard_service=DashboardService(store, clock=clock),
        trends_service=TrendsService(store, clock=clock),
        costs_service=CostsService(
            store, clock=clock, locale_currency=settings.locale_currency
        ),
        onboarding_service=OnboardingService(
            store, force_onboarding=settings.force_onboarding
        ),
    )


@pytest.fixture
def container(
    settings: Settings, store: EventStore, clock: MutableClock
) -> AppContainer:
    return build_test_container(settings, store, clock)
