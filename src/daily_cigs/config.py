"""Application configuration."""

import os
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from daily_cigs.app_logging import LOG_LEVELS
from daily_cigs.domain.currency import normalize_currency_code

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_DATA_PATH = Path("~/.config/daily-cigs/storage.json")


class Settings(BaseSettings):
    """Launch configuration loaded from environment variables."""

    data_path: Path = DEFAULT_DATA_PATH
    force_onboarding: bool = False
    locale_currency: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="DAILY_CIGS_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("locale_currency")
    @classmethod
    def _normalize_locale_currency(cls, value: str | None) -> str | None:
        return normalize_currency_code(value)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def resolve_data_path(raw: Path | str) -> Path:
    """Expand ``~`` and make the store path absolute."""
    return Path(raw).expanduser().resolve()
