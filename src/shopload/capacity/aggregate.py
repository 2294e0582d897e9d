from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Mapping

from shopload.allocation import DEFAULT_MAX_DAYS, DEFAULT_MAX_LOOKAHEAD, Load, allocate
from shopload.calendar import Calendar, week_start

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Contribution:
    key: str
    name: str
    hours: float


@dataclass(slots=True)
class DailyTotal:
    total: float = 0.0
    loads: list[Contribution] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProjectHours:
    key: str
    name: str
    hours: float


@dataclass(frozen=True, slots=True)
class WeeklySummary:
    week_index: int
    start_date: date
    end_date: date
    used_hours: float
    capacity_hours: float
    projects: tuple[ProjectHours, ...] = ()

    @property
    def utilization(self) -> float:
        return self.used_hours / self.capacity_hours if self.capacity_hours else 0.0

    @property
    def available_hours(self) -> float:
        return self.capacity_hours - self.used_hours


def allocate_all(
    loads: Iterable[Load],
    calendar: Calendar,
    *,
    max_lookahead: int = DEFAULT_MAX_LOOKAHEAD,
    max_days: int = DEFAULT_MAX_DAYS,
) -> dict[str, dict[str, float]]:
    """Allocation per load key, in load order.  The first load with a key wins."""
    allocations: dict[str, dict[str, float]] = {}
    for load in loads:
        if load.key not in allocations:
            allocations[load.key] = allocate(
                load, calendar, max_lookahead=max_lookahead, max_days=max_days
            )
    return allocations


def aggregate(
    loads: Iterable[Load],
    calendar: Calendar,
    *,
    max_lookahead: int = DEFAULT_MAX_LOOKAHEAD,
    max_days: int = DEFAULT_MAX_DAYS,
) -> tuple[dict[str, DailyTotal], dict[str, dict[str, float]]]:
    """
    Allocate every load and merge the results per day.

    Returns ``(daily_totals, allocations)``.  Daily totals are ordered by date;
    each day's contributions keep the order the loads were given in.  A load
    whose key was already seen is skipped, so both maps always agree.
    """
    allocations: dict[str, dict[str, float]] = {}
    totals: dict[str, DailyTotal] = {}
    for load in loads:
        if load.key in allocations:
            logger.warning("Duplicate load key %s; keeping the first, skipping %r.", load.key, load.name)
            continue
        schedule = allocate(load, calendar, max_lookahead=max_lookahead, max_days=max_days)
        allocations[load.key] = schedule
        for day, hours in schedule.items():
            entry = totals.setdefault(day, DailyTotal())
            entry.total += hours
            entry.loads.append(Contribution(key=load.key, name=load.name, hours=hours))

    logger.debug("Aggregated %d loads over %d days.", len(allocations), len(totals))
    return dict(sorted(totals.items())), allocations


def summarize_weeks(
    daily_totals: Mapping[str, DailyTotal],
    calendar: Calendar,
    start_week: date,
    week_count: int,
) -> list[WeeklySummary]:
    """Roll working-day totals into ``week_count`` Monday-start weeks."""
    first = week_start(start_week)
    summaries: list[WeeklySummary] = []

    for index in range(max(week_count, 0)):
        monday = first + timedelta(weeks=index)
        sunday = monday + timedelta(days=6)
        used = 0.0
        by_load: dict[str, list] = {}

        for day in calendar.working_dates(monday, sunday):
            entry = daily_totals.get(day.isoformat())
            if entry is None:
                continue
            used += entry.total
            for part in entry.loads:
                slot = by_load.setdefault(part.key, [part.name, 0.0])
                slot[1] += part.hours

        projects = sorted(
            (ProjectHours(key, name, hours) for key, (name, hours) in by_load.items() if hours > 0),
            key=lambda p: p.hours,
            reverse=True,
        )
        summaries.append(
            WeeklySummary(
                week_index=index,
                start_date=monday,
                end_date=sunday,
                used_hours=used,
                capacity_hours=calendar.capacity_for_week(monday),
                projects=tuple(projects),
            )
        )

    return summaries
