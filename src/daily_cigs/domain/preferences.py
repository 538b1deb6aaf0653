"""Preference keys, defaults and snapshot model."""

from dataclasses import dataclass
from decimal import Decimal

LOGS_KEY = "logs"
DAILY_GOAL_KEY = "dailyGoal"
UNIT_COST_KEY = "cigaretteCost"
CURRENCY_KEY = "currency"
HAS_SEEN_WELCOME_KEY = "hasSeenWelcome"
NOTIFICATIONS_KEY = "notificationsEnabled"

DEFAULT_DAILY_GOAL = 0
DEFAULT_UNIT_COST = Decimal(0)

PREFERENCE_DEFAULTS: dict[str, object] = {
    DAILY_GOAL_KEY: DEFAULT_DAILY_GOAL,
    UNIT_COST_KEY: DEFAULT_UNIT_COST,
    CURRENCY_KEY: None,
    HAS_SEEN_WELCOME_KEY: False,
    NOTIFICATIONS_KEY: False,
}


@dataclass(frozen=True)
class Preferences:
    """Snapshot of all scalar preferences."""

    daily_goal: int = DEFAULT_DAILY_GOAL
    unit_cost: Decimal = DEFAULT_UNIT_COST
    currency: str | None = None
    has_seen_onboarding: bool = False
    notifications_enabled: bool = False
