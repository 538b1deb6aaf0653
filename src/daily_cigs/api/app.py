"""FastAPI application factory."""

import logging
from typing import Literal

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from daily_cigs.api.schemas import LogCreate, PreferencesUpdate
from daily_cigs.app_logging import configure_logging
from daily_cigs.containers import AppContainer
from daily_cigs.domain.errors import InvalidArgument, StorageWriteError
from daily_cigs.domain.logs import LogEntry
from daily_cigs.domain.preferences import Preferences
from daily_cigs.services.costs import CostsSummary
from daily_cigs.services.dashboard import TodaySummary
from daily_cigs.services.trends import TrendsSummary

PeriodParam = Literal["week", "month"]


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies.

    Handlers are coroutines so every store access runs on the event loop
    thread, one request at a time.
    """
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    logger.info("Serving logs from %s", container.settings.data_path)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(StorageWriteError)
    async def storage_write_error(
        request: Request, exc: StorageWriteError
    ) -> JSONResponse:
        logger.warning("Write failed for %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=503,
            content={"detail": "Could not save your data. Please try again."},
        )

    @app.exception_handler(InvalidArgument)
    async def invalid_argument(request: Request, exc: InvalidArgument) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/today")
    async def today(request: Request) -> dict[str, object]:
        """Return today's count, time-of-day split and goal progress."""
        state_container: AppContainer = request.app.state.container
        return _today_payload(state_container.dashboard_service.get_today())

    @app.get("/logs")
    async def list_logs(request: Request) -> dict[str, object]:
        """Return every stored log."""
        state_container: AppContainer = request.app.state.container
        logs = state_container.store.get_all_logs()
        return {"logs": [_log_payload(log) for log in logs]}

    @app.post("/logs")
    async def add_log(
        request: Request, payload: LogCreate | None = None
    ) -> dict[str, object]:
        """Record a cigarette, now or at the given timestamp."""
        state_container: AppContainer = request.app.state.container
        entry = (
            LogEntry(id=payload.id, timestamp=payload.timestamp) if payload else None
        )
        summary = state_container.dashboard_service.add_log(entry)
        return _today_payload(summary)

    @app.delete("/logs/latest")
    async def remove_latest_log(request: Request) -> dict[str, object]:
        """Undo today's most recent log."""
        state_container: AppContainer = request.app.state.container
        return _today_payload(state_container.dashboard_service.remove_latest())

    @app.delete("/logs/{log_id}")
    async def remove_log(log_id: str, request: Request) -> dict[str, object]:
        """Remove a log by id; unknown ids are ignored."""
        state_container: AppContainer = request.app.state.container
        state_container.store.remove_log(log_id)
        return _today_payload(state_container.dashboard_service.get_today())

    @app.get("/trends")
    async def trends(
        request: Request, period: PeriodParam = "week"
    ) -> dict[str, object]:
        """Return the trend chart series and period statistics."""
        state_container: AppContainer = request.app.state.container
        return _trends_payload(state_container.trends_service.get_trends(period))

    @app.get("/costs")
    async def costs(
        request: Request, period: PeriodParam = "week"
    ) -> dict[str, object]:
        """Return spending for the trailing window and the current period."""
        state_container: AppContainer = request.app.state.container
        return _costs_payload(state_container.costs_service.get_costs(period))

    @app.get("/preferences")
    async def get_preferences(request: Request) -> dict[str, object]:
        """Return every preference."""
        state_container: AppContainer = request.app.state.container
        return _preferences_payload(state_container.store.get_preferences())

    @app.put("/preferences")
    async def update_preferences(
        update: PreferencesUpdate, request: Request
    ) -> dict[str, object]:
        """Update the preferences present in the body."""
        store = request.app.state.container.store
        if update.daily_goal is not None:
            store.set_daily_goal(update.daily_goal)
        if update.unit_cost is not None:
            store.set_unit_cost(update.unit_cost)
        if "currency" in update.model_fields_set:
            store.set_currency(update.currency)
        if update.notifications_enabled is not None:
            store.set_notifications_enabled(update.notifications_enabled)
        return _preferences_payload(store.get_preferences())

    @app.get("/onboarding")
    async def onboarding(request: Request) -> dict[str, bool]:
        """Tell the client whether to show the welcome screen."""
        state_container: AppContainer = request.app.state.container
        return {"show": state_container.onboarding_service.should_show()}

    @app.post("/onboarding/complete")
    async def complete_onboarding(request: Request) -> dict[str, str]:
        """Remember that the welcome screen was dismissed."""
        state_container: AppContainer = request.app.state.container
        state_container.onboarding_service.complete()
        return {"status": "ok"}

    return app


def _log_payload(entry: LogEntry) -> dict[str, str]:
    return {"id": entry.id, "timestamp": entry.timestamp.isoformat()}


def _today_payload(summary: TodaySummary) -> dict[str, object]:
    return {
        "date": summary.day.isoformat(),
        "count": summary.count,
        "logs": [_log_payload(log) for log in summary.logs],
        "time_of_day": {
            "morning": summary.time_of_day.morning,
            "afternoon": summary.time_of_day.afternoon,
            "evening": summary.time_of_day.evening,
            "night": summary.time_of_day.night,
        },
        "goal": {
            "goal": summary.goal.goal,
            "remaining": summary.goal.remaining,
            "exceeded": summary.goal.exceeded,
        },
    }


def _trends_payload(summary: TrendsSummary) -> dict[str, object]:
    return {
        "period": summary.period,
        "chart": [
            {"date": bucket.day.isoformat(), "count": bucket.count}
            for bucket in summary.chart
        ],
        "total": summary.total,
        "daily_average": summary.daily_average,
        "change_from_last_period": summary.change_from_last_period,
    }


def _costs_payload(summary: CostsSummary) -> dict[str, object]:
    return {
        "period": summary.period,
        "configured": summary.configured,
        "currency": summary.currency,
        "currency_symbol": summary.currency_symbol,
        "unit_cost": float(summary.unit_cost),
        "chart": [
            {
                "date": row.day.isoformat(),
                "count": row.count,
                "amount": float(row.amount),
            }
            for row in summary.chart
        ],
        "total_spent": float(summary.total_spent),
        "total_count": summary.total_count,
        "daily_average": float(summary.daily_average),
    }


def _preferences_payload(preferences: Preferences) -> dict[str, object]:
    return {
        "daily_goal": preferences.daily_goal,
        "unit_cost": float(preferences.unit_cost),
        "currency": preferences.currency,
        "has_seen_onboarding": preferences.has_seen_onboarding,
        "notifications_enabled": preferences.notifications_enabled,
    }
