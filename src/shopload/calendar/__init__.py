"""
shopload.calendar
~~~~~~~~~~~~~~~~~

Working-day calendar for the shop.  A Calendar combines a weekday set with
exact-date holidays, and derives the effective hours-per-day capacity from
either an explicit daily figure or the weekly figure spread over the working
days.

Basic usage::

    from datetime import date
    from shopload.calendar import Calendar

    cal = Calendar(["mon", "tue", "wed", "thu", "fri"], holidays=["2025-07-04"])
    cal.is_working_day(date(2025, 7, 4))                  # → False
    cal.working_dates(date(2025, 7, 1), date(2025, 7, 7))  # Tue, Wed, Thu, Mon

    Calendar(weekly_capacity=400).daily_capacity        # → 80.0

Public API
----------
Calendar                The main class.
CalendarError           Raised for invalid calendar configuration.
DEFAULT_DAILY_CAPACITY  Fallback hours per day when nothing is configured.
parse_date              Lenient ``YYYY-MM-DD`` parser returning ``None`` on failure.
week_start              Monday of a date's week.
"""

from __future__ import annotations

from shopload.calendar._exceptions import CalendarError
from shopload.calendar.calendar import (
    DEFAULT_DAILY_CAPACITY,
    DEFAULT_WORKING_DAYS,
    Calendar,
    parse_date,
    week_start,
)

__all__ = [
    "Calendar",
    "CalendarError",
    "DEFAULT_DAILY_CAPACITY",
    "DEFAULT_WORKING_DAYS",
    "parse_date",
    "week_start",
]
