"""Pydantic models for API request bodies."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class LogCreate(BaseModel):
    """An explicit log entry to append."""

    id: str = Field(min_length=1)
    timestamp: datetime


class PreferencesUpdate(BaseModel):
    """Partial preferences update; omitted fields are left unchanged."""

    daily_goal: int | None = Field(default=None, ge=0)
    unit_cost: Decimal | None = Field(default=None, ge=0)
    currency: str | None = None
    notifications_enabled: bool | None = None
