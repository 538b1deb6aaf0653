"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from daily_cigs.adapters.json_file_store import JsonFileKeyValueStore
from daily_cigs.config import Settings, resolve_data_path
from daily_cigs.services.costs import CostsService
from daily_cigs.services.dashboard import DashboardService
from daily_cigs.services.event_store import EventStore
from daily_cigs.services.onboarding import OnboardingService
from daily_cigs.services.trends import TrendsService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: EventStore
    dashboard_service: DashboardService
    trends_service: TrendsService
    costs_service: CostsService
    onboarding_service: OnboardingService


def build_container(
    settings: Settings | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    backend = JsonFileKeyValueStore(resolve_data_path(resolved_settings.data_path))
    store = EventStore(backend=backend, clock=clock)
    return AppContainer(
        settings=resolved_settings,
        store=store,
        dashboard_service=DashboardService(store, clock=clock),
        trends_service=TrendsService(store, clock=clock),
        costs_service=CostsService(
            store,
            clock=clock,
            locale_currency=resolved_settings.locale_currency,
        ),
        onboarding_service=OnboardingService(
            store, force_onboarding=resolved_settings.force_onboarding
        ),
    )
