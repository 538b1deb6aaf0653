"""Tests for the local JSON API."""

import logging

from fastapi.testclient import TestClient

from daily_cigs.api.app import create_app
from daily_cigs.config import Settings
from daily_cigs.containers import AppContainer
from daily_cigs.services.event_store import EventStore
from tests.conftest import FailingKeyValueStore, MutableClock, build_test_container


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_add_and_remove_logs(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    added = client.post("/logs")
    explicit = client.post(
        "/logs", json={"id": "morning", "timestamp": "2026-10-14T08:00:00"}
    )
    removed = client.delete("/logs/latest")

    assert added.json()["count"] == 1
    assert explicit.json()["count"] == 2
    assert explicit.json()["time_of_day"]["morning"] == 1
    assert removed.json()["count"] == 1
    assert [log["id"] for log in removed.json()["logs"]] == ["morning"]

    response = client.delete("/logs/morning")

    assert response.json()["count"] == 0
    assert client.get("/logs").json() == {"logs": []}


def test_today_reports_date_and_goal(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    client.put("/preferences", json={"daily_goal": 2})
    client.post("/logs")

    body = client.get("/today").json()

    assert body["date"] == "2026-10-14"
    assert body["goal"] == {"goal": 2, "remaining": 1, "exceeded": False}


def test_trends_and_costs(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    client.post("/logs")
    client.put("/preferences", json={"unit_cost": 0.5, "currency": "EUR"})

    trends = client.get("/trends", params={"period": "month"}).json()
    costs = client.get("/costs").json()

    assert len(trends["chart"]) == 30
    assert trends["total"] == 1
    assert costs["configured"] is True
    assert costs["currency_symbol"] == "€"
    assert costs["total_spent"] == 0.5
    assert costs["chart"][-1] == {"date": "2026-10-14", "count": 1, "amount": 0.5}


def test_unknown_period_is_rejected(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/trends", params={"period": "year"}).status_code == 422


def test_preferences_update_and_clear_currency(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    client.put(
        "/preferences", json={"currency": "gbp", "notifications_enabled": True}
    )
    cleared = client.put("/preferences", json={"currency": None}).json()

    assert cleared["currency"] is None
    assert cleared["notifications_enabled"] is True
    assert cleared["daily_goal"] == 0


def test_invalid_currency_returns_422(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.put("/preferences", json={"currency": "dollars"})

    assert response.status_code == 422


def test_onboarding_flow(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/onboarding").json() == {"show": True}
    assert client.post("/onboarding/complete").json() == {"status": "ok"}
    assert client.get("/onboarding").json() == {"show": False}


def test_write_failure_returns_503(settings: Settings, clock: MutableClock) -> None:
    store = EventStore(FailingKeyValueStore(fail_writes=True), clock=clock)
    client = TestClient(create_app(build_test_container(settings, store, clock)))

    response = client.post("/logs")

    assert response.status_code == 503
    assert "try again" in response.json()["detail"]
    assert client.get("/today").json()["count"] == 0


def test_create_app_applies_configured_log_level(
    settings: Settings, store: EventStore, clock: MutableClock
) -> None:
    logger = logging.getLogger("daily_cigs")
    original_level = logger.level
    quiet = settings.model_copy(update={"log_level": "WARNING"})

    try:
        create_app(build_test_container(quiet, store, clock))
        assert logger.level == logging.WARNING
    finally:
        logger.setLevel(original_level)
