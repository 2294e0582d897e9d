from __future__ import annotations

import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

import numpy as np

from ._exceptions import CalendarError

DateLike = Union[str, date, datetime]

DEFAULT_DAILY_CAPACITY: float = 8.0
DEFAULT_WORKING_DAYS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri")

_DAY_KEYS: tuple[str, ...] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
_DAY_NAMES: dict[str, int] = {
    **{key: i for i, key in enumerate(_DAY_KEYS)},
    **{
        name: i
        for i, name in enumerate(
            ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
        )
    },
}
_ONE_DAY = np.timedelta64(1, "D")


# ── date helpers ──────────────────────────────────────────────────────────────

def parse_date(value: Optional[DateLike]) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` (or an ISO datetime) into a date, ``None`` if unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def _weekday_index(value: Union[str, int]) -> int:
    if isinstance(value, bool):
        raise CalendarError(f"Invalid working day {value!r}.")
    if isinstance(value, int):
        if not 0 <= value <= 6:
            raise CalendarError(f"Weekday index must be in 0..6; got {value}.")
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        if key in _DAY_NAMES:
            return _DAY_NAMES[key]
    raise CalendarError(f"Unknown working day {value!r}.")


def _holiday(value: DateLike) -> date:
    parsed = parse_date(value)
    if parsed is None:
        raise CalendarError(f"Holiday must be a YYYY-MM-DD date; got {value!r}.")
    return parsed


def _capacity(value: Optional[float], label: str) -> Optional[float]:
    if value is None:
        return None
    hours = float(value)
    if not math.isfinite(hours) or hours < 0.0:
        raise CalendarError(f"{label} capacity must be a non-negative number; got {value!r}.")
    return hours


# ── calendar ──────────────────────────────────────────────────────────────────

class Calendar:
    """
    Working-day calendar with a shared daily capacity.

    A date is a working day when its weekday is in the configured set and it is
    not a holiday.  Membership is answered by a NumPy business-day calendar,
    so whole date ranges are resolved in one vectorised call.
    """

    def __init__(
        self,
        working_days: Optional[Iterable[Union[str, int]]] = None,
        holidays: Iterable[DateLike] = (),
        daily_capacity: Optional[float] = None,
        weekly_capacity: Optional[float] = None,
    ) -> None:
        if working_days is None:
            working_days = DEFAULT_WORKING_DAYS

        self._weekdays: frozenset[int] = frozenset(_weekday_index(d) for d in working_days)
        self._holidays: frozenset[date] = frozenset(_holiday(h) for h in holidays if h)
        self._daily_setting = _capacity(daily_capacity, "Daily")
        self._weekly_setting = _capacity(weekly_capacity, "Weekly")

        mask = [1 if i in self._weekdays else 0 for i in range(7)]
        # NumPy refuses an all-zero weekmask; such a calendar has no working days.
        self._busdaycal: Optional[np.busdaycalendar] = (
            np.busdaycalendar(
                weekmask=mask,
                holidays=np.array(sorted(self._holidays), dtype="datetime64[D]"),
            )
            if any(mask)
            else None
        )

    # ── working days ─────────────────────────────────────────────────────

    def is_working_day(self, day: date) -> bool:
        if self._busdaycal is None:
            return False
        return bool(np.is_busday(np.datetime64(day, "D"), busdaycal=self._busdaycal))

    def working_dates(self, start: date, end: date) -> list[date]:
        """Working dates in ``[start, end]``, in order.  Empty when ``end < start``."""
        if self._busdaycal is None or end < start:
            return []
        days = np.arange(
            np.datetime64(start, "D"), np.datetime64(end, "D") + _ONE_DAY, dtype="datetime64[D]"
        )
        return days[np.is_busday(days, busdaycal=self._busdaycal)].tolist()

    def count_working_days(self, start: date, end: date) -> int:
        if self._busdaycal is None or end < start:
            return 0
        return int(
            np.busday_count(
                np.datetime64(start, "D"),
                np.datetime64(end, "D") + _ONE_DAY,
                busdaycal=self._busdaycal,
            )
        )

    def next_working_date(self, start: date, max_lookahead: int = 730) -> Optional[date]:
        """First working date at or after ``start`` within ``max_lookahead`` days."""
        if self._busdaycal is None or max_lookahead <= 0:
            return None
        found = self.working_dates(start, start + timedelta(days=max_lookahead - 1))
        return found[0] if found else None

    # ── capacity ─────────────────────────────────────────────────────────

    @property
    def working_days_per_week(self) -> int:
        return len(self._weekdays)

    @property
    def daily_capacity(self) -> float:
        if self._daily_setting:
            return self._daily_setting
        if self._weekly_setting and self.working_days_per_week > 0:
            return self._weekly_setting / self.working_days_per_week
        return DEFAULT_DAILY_CAPACITY

    @property
    def weekly_capacity(self) -> float:
        if self._weekly_setting:
            return self._weekly_setting
        return self.daily_capacity * self.working_days_per_week

    def capacity_for_week(self, start: date) -> float:
        """Capacity of the week beginning at ``start``, holidays included."""
        if self._weekly_setting:
            return self._weekly_setting
        days = self.count_working_days(start, start + timedelta(days=6))
        return self.daily_capacity * days

    # ── properties / repr ────────────────────────────────────────────────

    @property
    def working_days(self) -> tuple[str, ...]:
        return tuple(_DAY_KEYS[i] for i in sorted(self._weekdays))

    @property
    def holidays(self) -> frozenset[date]:
        return self._holidays

    def __repr__(self) -> str:
        return (
            f"Calendar(working_days={list(self.working_days)}, "
            f"holidays={len(self._holidays)}, "
            f"daily_capacity={self.daily_capacity}, "
            f"weekly_capacity={self.weekly_capacity})"
        )
