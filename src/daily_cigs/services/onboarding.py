"""Welcome screen gating."""

import logging
from dataclasses import dataclass

from daily_cigs.services.event_store import EventStore

_logger = logging.getLogger(__name__)


@dataclass
class OnboardingService:
    """Decides whether to show the welcome screen on launch."""

    store: EventStore
    force_onboarding: bool = False

    def should_show(self) -> bool:
        """Return True when forced by launch config or not yet seen."""
        if self.force_onboarding:
            return True
        return not self.store.has_seen_onboarding()

    def complete(self) -> None:
        """Remember that the welcome screen was dismissed."""
        self.store.mark_onboarding_seen()
        _logger.info("Onboarding completed")
