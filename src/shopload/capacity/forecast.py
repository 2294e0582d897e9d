from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, Mapping, Optional, Union

import numpy as np

from shopload.allocation import ProjectRecord, validate_record
from shopload.calendar import parse_date, week_start

from .utilization import DEFAULT_THRESHOLD

logger = logging.getLogger(__name__)

WEEKS_PER_MONTH: float = 4.345
DEFAULT_FORECAST_WEEKS: int = 24
SUGGESTED_MIN_SHARE: float = 0.6

ProjectLike = Union[ProjectRecord, Mapping[str, Any]]


@dataclass(slots=True)
class BucketProject:
    id: str
    name: Optional[str]
    hours: float
    status: Optional[str]
    type: str


@dataclass(slots=True)
class Bucket:
    week_index: int
    start_date: date
    end_date: date
    capacity_hours: float
    used_hours: float = 0.0
    projects: list[BucketProject] = field(default_factory=list)

    @property
    def utilization(self) -> float:
        return self.used_hours / self.capacity_hours if self.capacity_hours else 0.0


@dataclass(frozen=True, slots=True)
class Recommendation:
    week_index: int
    start_date: date
    end_date: date
    available_hours: float
    suggested_min_hours: float
    suggested_max_hours: float


@dataclass(frozen=True, slots=True)
class ShopLoadForecast:
    total_committed_hours: float
    total_pending_hours: float
    total_remaining_hours: float
    backlog_months: float
    weekly_capacity: float
    buckets: list[Bucket]
    gaps: list[Bucket]
    overloads: list[Bucket]
    recommendations: list[Recommendation]
    shift_multiplier: float
    weeks: int


class WeeklyCapacity:
    """
    Fixed-capacity week buckets filled greedily.

    Each project pours its hours into the earliest bucket with free capacity,
    starting from the week it is scheduled to begin.  Nothing is ever placed
    beyond a bucket's capacity; hours that do not fit inside the horizon are
    left unplaced.
    """

    def __init__(self, weekly_hours: float, weeks: int, start: date) -> None:
        if weeks < 0:
            raise ValueError("Forecast must cover a non-negative number of weeks.")
        self._start = week_start(start)
        self._capacity = np.full(weeks, max(0.0, float(weekly_hours)))
        self._used = np.zeros(weeks)
        self._buckets = [
            Bucket(
                week_index=i,
                start_date=self._start + timedelta(weeks=i),
                end_date=self._start + timedelta(weeks=i, days=6),
                capacity_hours=float(self._capacity[i]),
            )
            for i in range(weeks)
        ]

    def week_index(self, day: Optional[date]) -> int:
        if day is None:
            return 0
        return max(0, (week_start(day) - self._start).days // 7)

    def process(self, project: ProjectRecord, hours: float, type: str) -> float:
        """Place ``hours`` for ``project``; returns the hours that did not fit."""
        if hours <= 0:
            return 0.0
        first = self.week_index(_start_of(project))
        free = np.clip(self._capacity[first:] - self._used[first:], 0.0, None)
        before = np.cumsum(free) - free
        take = np.minimum(free, np.clip(hours - before, 0.0, None))

        for offset in np.flatnonzero(take > 0):
            self._place(first + int(offset), project, float(take[offset]), type)
        return max(0.0, hours - float(take.sum()))

    def _place(self, index: int, project: ProjectRecord, hours: float, type: str) -> None:
        self._used[index] += hours
        bucket = self._buckets[index]
        bucket.used_hours = float(self._used[index])
        for existing in bucket.projects:
            if existing.id == project.id and existing.type == type:
                existing.hours += hours
                return
        bucket.projects.append(
            BucketProject(
                id=project.id or "",
                name=project.project_name,
                hours=hours,
                status=project.status,
                type=type,
            )
        )

    @property
    def buckets(self) -> list[Bucket]:
        return self._buckets

    def __repr__(self) -> str:
        return (
            f"WeeklyCapacity(start={self._start.isoformat()}, "
            f"weeks={len(self._buckets)}, "
            f"used_hours={float(self._used.sum())})"
        )


# ── forecast ──────────────────────────────────────────────────────────────────

def remaining_hours(project: ProjectRecord) -> float:
    if project.remaining_shop_hours is not None:
        return project.remaining_shop_hours
    if project.estimated_shop_hours_total is not None:
        return project.estimated_shop_hours_total
    return 0.0


def _start_of(project: ProjectRecord) -> Optional[date]:
    raw = project.projected_start_date
    if raw is None:
        raw = project.scheduled_start_date
    return parse_date(raw)


def _active(raws: Iterable[ProjectLike]) -> list[ProjectRecord]:
    records = (validate_record(ProjectRecord, raw) for raw in raws)
    return [p for p in records if p is not None and not p.archived]


def _compare(a: ProjectRecord, b: ProjectRecord) -> int:
    a_date, b_date = _start_of(a), _start_of(b)
    if a_date and b_date:
        return (a_date > b_date) - (a_date < b_date)
    if a_date:
        return -1
    if b_date:
        return 1
    if a.priority is not None and b.priority is not None:
        return a.priority - b.priority
    a_name, b_name = a.project_name or "", b.project_name or ""
    return (a_name > b_name) - (a_name < b_name)


def build_forecast(
    projects: Iterable[ProjectLike],
    weekly_capacity: float,
    *,
    pending: Iterable[ProjectLike] = (),
    weeks: int = DEFAULT_FORECAST_WEEKS,
    start: Optional[date] = None,
    shift_multiplier: float = 1.0,
    threshold: float = DEFAULT_THRESHOLD,
) -> ShopLoadForecast:
    """
    Week-bucket backlog forecast.

    Committed projects are placed first, ordered by start date, then
    priority, then name; pending bids follow in the order given.
    """
    capacity = max(0.0, weekly_capacity * shift_multiplier)
    pool = WeeklyCapacity(capacity, weeks, start or date.today())

    committed = sorted(_active(projects), key=functools.cmp_to_key(_compare))
    bids = _active(pending)

    unplaced = 0.0
    for project in committed:
        unplaced += pool.process(project, remaining_hours(project), "committed")
    for project in bids:
        unplaced += pool.process(project, remaining_hours(project), "pending")
    if unplaced > 0:
        logger.info("%.1f h do not fit within the %d-week forecast.", unplaced, weeks)

    total_committed = sum(remaining_hours(p) for p in committed)
    total_pending = sum(remaining_hours(p) for p in bids)
    monthly_capacity = capacity * WEEKS_PER_MONTH

    gaps: list[Bucket] = []
    overloads: list[Bucket] = []
    for bucket in pool.buckets:
        if bucket.capacity_hours <= 0:
            continue
        if bucket.utilization < threshold:
            gaps.append(bucket)
        elif bucket.utilization > 1:
            overloads.append(bucket)

    recommendations = [
        Recommendation(
            week_index=gap.week_index,
            start_date=gap.start_date,
            end_date=gap.end_date,
            available_hours=gap.capacity_hours - gap.used_hours,
            suggested_min_hours=max(0.0, (gap.capacity_hours - gap.used_hours) * SUGGESTED_MIN_SHARE),
            suggested_max_hours=gap.capacity_hours - gap.used_hours,
        )
        for gap in gaps
    ]

    return ShopLoadForecast(
        total_committed_hours=total_committed,
        total_pending_hours=total_pending,
        total_remaining_hours=total_committed + total_pending,
        backlog_months=total_committed / monthly_capacity if monthly_capacity > 0 else 0.0,
        weekly_capacity=capacity,
        buckets=pool.buckets,
        gaps=gaps,
        overloads=overloads,
        recommendations=recommendations,
        shift_multiplier=shift_multiplier,
        weeks=weeks,
    )
