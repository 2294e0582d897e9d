from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from .aggregate import WeeklySummary

DEFAULT_THRESHOLD: float = 0.7
CURRENT_PERIOD_WEEKS: int = 4
DAY_TOLERANCE: float = 0.01


class Utilization(str, Enum):
    UNDER_UTILIZED = "under-utilized"
    OPTIMAL = "optimal"
    OVERLOADED = "overloaded"


def utilization_of(used_hours: float, capacity_hours: float) -> float:
    return used_hours / capacity_hours if capacity_hours else 0.0


def classify(summary: WeeklySummary, threshold: float = DEFAULT_THRESHOLD) -> Utilization:
    """
    Bucket a week against capacity.

    Under-utilized below ``threshold``; overloaded when used hours exceed
    capacity; optimal otherwise.
    """
    if utilization_of(summary.used_hours, summary.capacity_hours) < threshold:
        return Utilization.UNDER_UTILIZED
    if summary.used_hours > summary.capacity_hours:
        return Utilization.OVERLOADED
    return Utilization.OPTIMAL


def find_gaps(
    summaries: Iterable[WeeklySummary], threshold: float = DEFAULT_THRESHOLD
) -> list[WeeklySummary]:
    """Under-utilized weeks, ignoring weeks without capacity."""
    return [
        s for s in summaries
        if s.capacity_hours > 0 and classify(s, threshold) is Utilization.UNDER_UTILIZED
    ]


def find_overloads(summaries: Iterable[WeeklySummary]) -> list[WeeklySummary]:
    return [s for s in summaries if s.capacity_hours > 0 and s.used_hours > s.capacity_hours]


def split_current(
    summaries: Sequence[WeeklySummary], current_weeks: int = CURRENT_PERIOD_WEEKS
) -> tuple[list[WeeklySummary], list[WeeklySummary]]:
    """Partition by week index into (current period, later)."""
    current = [s for s in summaries if s.week_index < current_weeks]
    later = [s for s in summaries if s.week_index >= current_weeks]
    return current, later


def day_status(hours: float, capacity: float, working: bool = True) -> str:
    """Status of one calendar cell: closed, over, full, partial or idle."""
    if not working:
        return "closed"
    if capacity <= 0:
        return "partial" if hours > 0 else "idle"
    if hours > capacity + DAY_TOLERANCE:
        return "over"
    if hours > 0 and abs(hours - capacity) < DAY_TOLERANCE:
        return "full"
    if hours > 0:
        return "partial"
    return "idle"
