from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shopload.allocation import DEFAULT_MAX_DAYS, DEFAULT_MAX_LOOKAHEAD
from shopload.calendar import DEFAULT_WORKING_DAYS, Calendar

logger = logging.getLogger(__name__)

# Host settings document (camelCase) → field name.
_COMPANY_KEYS = {
    "workingDays": "working_days",
    "holidays": "holidays",
    "shopCapacityHoursPerDay": "shop_capacity_hours_per_day",
    "shopCapacityHoursPerWeek": "shop_capacity_hours_per_week",
    "backlogForecastWeeks": "backlog_forecast_weeks",
    "underUtilizedThreshold": "under_utilized_threshold",
}


def _split(value: list[str] | str) -> list[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [item.strip() for item in value if item and item.strip()]


class ScheduleSettings(BaseSettings):
    """Scheduler configuration, from the environment (``SHOPLOAD_*``) or the host's settings."""

    # Calendar
    working_days: list[str] | str = Field(
        default_factory=lambda: list(DEFAULT_WORKING_DAYS),
        description="Working weekdays; a list or a comma-separated string",
    )
    holidays: list[str] | str = Field(
        default_factory=list, description="Non-working dates as YYYY-MM-DD"
    )

    # Capacity
    shop_capacity_hours_per_day: Optional[float] = Field(default=None, ge=0)
    shop_capacity_hours_per_week: Optional[float] = Field(default=None, ge=0)

    # Forecast / reporting
    backlog_forecast_weeks: int = Field(default=24, ge=0)
    under_utilized_threshold: float = Field(default=0.7, ge=0, le=1)
    current_period_weeks: int = Field(
        default=4, ge=0, description="Leading weeks reported as the current period"
    )

    # Safety caps
    max_open_ended_days: int = Field(default=DEFAULT_MAX_DAYS, gt=0)
    max_lookahead_days: int = Field(default=DEFAULT_MAX_LOOKAHEAD, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="SHOPLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("working_days")
    @classmethod
    def validate_working_days(cls, v: list[str] | str) -> list[str]:
        """An empty working-day list means the default week"""
        days = _split(v)
        return days or list(DEFAULT_WORKING_DAYS)

    @field_validator("holidays")
    @classmethod
    def validate_holidays(cls, v: list[str] | str) -> list[str]:
        return _split(v)

    @classmethod
    def from_company_settings(cls, company: Mapping[str, Any], **overrides: Any) -> "ScheduleSettings":
        """Build settings from the host's camelCase settings document."""
        values = {
            field: company[key]
            for key, field in _COMPANY_KEYS.items()
            if company.get(key) is not None
        }
        values.update(overrides)
        return cls(**values)

    def calendar(self) -> Calendar:
        cal = Calendar(
            working_days=self.working_days,
            holidays=self.holidays,
            daily_capacity=self.shop_capacity_hours_per_day,
            weekly_capacity=self.shop_capacity_hours_per_week,
        )
        logger.debug("Built %r", cal)
        return cal
