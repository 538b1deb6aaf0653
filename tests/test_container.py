"""Tests for container wiring."""

from datetime import datetime

from daily_cigs.config import Settings
from daily_cigs.containers import build_container
from tests.conftest import NOW


def test_build_container_creates_services(settings: Settings) -> None:
    container = build_container(settings, clock=lambda: NOW)

    summary = container.dashboard_service.add_log()

    assert summary.count == 1
    assert settings.data_path.exists()
    assert container.trends_service.get_trends("week").total == 1


def test_build_container_applies_launch_config(settings: Settings) -> None:
    forced = settings.model_copy(update={"force_onboarding": True})
    container = build_container(forced, clock=datetime.now)

    container.onboarding_service.complete()

    assert container.onboarding_service.should_show()
