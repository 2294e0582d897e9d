from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Union

from shopload.allocation import Load, ProductionEntry, ProjectRecord, collect_loads
from shopload.calendar import Calendar
from shopload.capacity import (
    DailyTotal,
    Utilization,
    WeeklySummary,
    aggregate,
    classify,
    find_gaps,
    find_overloads,
    split_current,
    summarize_weeks,
)
from shopload.settings import ScheduleSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PlanReport:
    allocations: dict[str, dict[str, float]]
    daily_totals: dict[str, DailyTotal]
    weeks: list[WeeklySummary]
    classifications: list[Utilization]
    gaps_current: list[WeeklySummary]
    gaps_future: list[WeeklySummary]
    overloads: list[WeeklySummary]


class Planner:
    """Runs the whole pipeline for one settings snapshot: allocate, aggregate, roll up, classify."""

    def __init__(self, settings: Optional[ScheduleSettings] = None) -> None:
        self._settings = settings if settings is not None else ScheduleSettings()
        self._calendar = self._settings.calendar()

    def run(self, loads: Iterable[Load], start: Optional[date] = None) -> PlanReport:
        s = self._settings
        daily_totals, allocations = aggregate(
            loads,
            self._calendar,
            max_lookahead=s.max_lookahead_days,
            max_days=s.max_open_ended_days,
        )
        weeks = summarize_weeks(
            daily_totals, self._calendar, start or date.today(), s.backlog_forecast_weeks
        )
        current, later = split_current(weeks, s.current_period_weeks)
        report = PlanReport(
            allocations=allocations,
            daily_totals=daily_totals,
            weeks=weeks,
            classifications=[classify(w, s.under_utilized_threshold) for w in weeks],
            gaps_current=find_gaps(current, s.under_utilized_threshold),
            gaps_future=find_gaps(later, s.under_utilized_threshold),
            overloads=find_overloads(weeks),
        )
        logger.debug(
            "Planned %d loads: %d gap weeks, %d overloaded weeks.",
            len(allocations),
            len(report.gaps_current) + len(report.gaps_future),
            len(report.overloads),
        )
        return report

    def from_records(
        self,
        projects: Iterable[Union[ProjectRecord, Mapping[str, Any]]] = (),
        entries: Iterable[Union[ProductionEntry, Mapping[str, Any]]] = (),
        start: Optional[date] = None,
    ) -> PlanReport:
        return self.run(collect_loads(projects, entries), start)

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def settings(self) -> ScheduleSettings:
        return self._settings
