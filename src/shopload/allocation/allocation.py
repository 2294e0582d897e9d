from __future__ import annotations

import logging
import math
from datetime import date, timedelta
from typing import Mapping, Optional

import numpy as np

from shopload.calendar import Calendar, parse_date

from .loads import Load

logger = logging.getLogger(__name__)

DEFAULT_MAX_LOOKAHEAD: int = 730
DEFAULT_MAX_DAYS: int = 5000
TOLERANCE: float = 0.01


def allocate(
    load: Load,
    calendar: Calendar,
    *,
    max_lookahead: int = DEFAULT_MAX_LOOKAHEAD,
    max_days: int = DEFAULT_MAX_DAYS,
) -> dict[str, float]:
    """
    Spread a load's hours over working days.

    Returns an ISO-date → hours map in date order.  Bounded loads (with an
    end date) split their hours evenly over the free days of the window after
    reserving what later pinned days need.  Open-ended loads run at the
    calendar's daily capacity until their hours are used up.

    Bad load data never raises: the result is the emptiest safe allocation.

    ``max_lookahead`` bounds the search for a working day when a bounded
    window has none; ``max_days`` bounds the open-ended walk.
    """
    total = _hours(load.total_hours)
    if total is None or total <= 0:
        return {}

    start = parse_date(load.start_date)
    if start is None:
        logger.warning("Load %s has an unparseable start date %r; skipped.", load.key, load.start_date)
        return {}

    overrides = _clean_overrides(load)

    if load.end_date:
        end = parse_date(load.end_date)
        if end is None:
            logger.warning("Load %s has an unparseable end date %r; using start.", load.key, load.end_date)
            end = start
        return _allocate_bounded(load, total, start, end, overrides, calendar, max_lookahead)
    return _allocate_open_ended(load, total, start, overrides, calendar, max_days)


# ── bounded window ────────────────────────────────────────────────────────────

def _allocate_bounded(
    load: Load,
    total: float,
    start: date,
    end: date,
    overrides: Mapping[date, float],
    calendar: Calendar,
    max_lookahead: int,
) -> dict[str, float]:
    dates = calendar.working_dates(start, end)
    if not dates:
        fallback = calendar.next_working_date(start, max_lookahead)
        if fallback is None:
            logger.warning(
                "Load %s: no working day within %d days of %s; nothing scheduled.",
                load.key, max_lookahead, start,
            )
            return {}
        logger.info("Load %s: window %s..%s has no working days; using %s.", load.key, start, end, fallback)
        dates = [fallback]

    pinned = np.array([overrides.get(d, np.nan) for d in dates], dtype=float)
    is_auto = np.isnan(pinned)
    fixed = np.where(is_auto, 0.0, np.maximum(pinned, 0.0))

    # Suffix sums: pinned hours strictly after each day, free days from each day on.
    future_demand = np.cumsum(fixed[::-1])[::-1] - fixed
    auto_days = np.cumsum(is_auto[::-1])[::-1]

    schedule: dict[str, float] = {}
    remaining = total
    for i, day in enumerate(dates):
        if is_auto[i]:
            reserved = min(float(future_demand[i]), max(remaining, 0.0))
            hours = max(0.0, remaining - reserved) / max(int(auto_days[i]), 1)
        else:
            hours = min(float(fixed[i]), max(remaining, 0.0))
        schedule[day.isoformat()] = hours
        remaining -= hours

    if remaining < -TOLERANCE:
        last = dates[-1].isoformat()
        schedule[last] = max(0.0, schedule[last] + remaining)
    elif remaining > TOLERANCE:
        logger.debug("Load %s: %.2f h left unassigned; every day in its window is pinned.", load.key, remaining)

    return schedule


# ── open-ended ────────────────────────────────────────────────────────────────

def _allocate_open_ended(
    load: Load,
    total: float,
    start: date,
    overrides: Mapping[date, float],
    calendar: Calendar,
    max_days: int,
) -> dict[str, float]:
    if max_days <= 0:
        return {}
    horizon = calendar.working_dates(start, start + timedelta(days=max_days - 1))
    working = set(horizon)
    pending = {day: hours for day, hours in overrides.items() if day in working}
    capacity = calendar.daily_capacity

    schedule: dict[str, float] = {}
    remaining = total
    for day in horizon:
        if remaining <= 0 and not pending:
            break
        if day in pending:
            hours = min(max(pending.pop(day), 0.0), max(remaining, 0.0))
        else:
            hours = min(capacity, max(remaining, 0.0))
        schedule[day.isoformat()] = hours
        remaining -= hours

    if remaining > 0 or pending:
        logger.warning(
            "Load %s: stopped after %d days with %.2f h unscheduled.", load.key, max_days, max(remaining, 0.0)
        )
    return schedule


# ── input cleaning ────────────────────────────────────────────────────────────

def _hours(value: object) -> Optional[float]:
    try:
        hours = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return hours if math.isfinite(hours) else None


def _clean_overrides(load: Load) -> dict[date, float]:
    cleaned: dict[date, float] = {}
    for key, value in (load.overrides or {}).items():
        day = parse_date(key)
        hours = _hours(value)
        if day is None or hours is None:
            logger.warning("Load %s: ignoring override %r=%r.", load.key, key, value)
            continue
        cleaned[day] = hours
    return cleaned
