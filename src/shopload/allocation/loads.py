"""
Loads and the host records they are built from.

A :class:`Load` is the scheduler's unit of work.  The host stores two kinds of
records that become loads: project documents (awarded or in-progress jobs
with fabrication hours) and manually entered production entries.  Both are
normalised here so the engine treats them uniformly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from shopload.calendar import Calendar, parse_date

logger = logging.getLogger(__name__)

SCHEDULABLE_STATUSES = frozenset({"awarded", "in_progress"})
UNTITLED_PROJECT = "Untitled Project"


@dataclass(frozen=True, slots=True)
class Load:
    id: str
    name: str
    total_hours: float
    start_date: Union[str, date, None]
    end_date: Union[str, date, None] = None
    overrides: Mapping[str, float] = field(default_factory=dict, hash=False)
    kind: str = "manual"

    def __post_init__(self) -> None:
        # Read-only view; the caller keeps ownership of its own dict.
        object.__setattr__(self, "overrides", MappingProxyType(dict(self.overrides or {})))

    @property
    def key(self) -> str:
        return f"{self.kind}-{self.id}"

    @property
    def open_ended(self) -> bool:
        return not self.end_date


# ── host records ──────────────────────────────────────────────────────────────

def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _drop_bad_hours(value: Any) -> Any:
    """Keep only the numeric entries of a day → hours mapping."""
    if not isinstance(value, Mapping):
        return None
    kept = {}
    for day, hours in value.items():
        number = _number(hours)
        if number is not None:
            kept[day] = number
    return kept


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )


class ProjectRecord(_Record):
    """Project document as stored by the host (camelCase keys accepted)."""

    id: Optional[str] = None
    project_name: Optional[str] = None
    status: Optional[str] = None
    archived: bool = False
    fab_hours: Optional[float] = None
    fab_window_start: Optional[str] = None
    fab_window_end: Optional[str] = None
    projected_start_date: Optional[str] = None
    scheduled_start_date: Optional[str] = None
    decision_date: Optional[str] = None
    remaining_shop_hours: Optional[float] = None
    estimated_shop_hours_total: Optional[float] = None
    priority: Optional[int] = None
    fab_daily_overrides: Optional[dict[str, float]] = None

    @field_validator("fab_hours", "remaining_shop_hours", "estimated_shop_hours_total", mode="before")
    @classmethod
    def tolerant_hours(cls, v: Any) -> Optional[float]:
        """Placeholders such as ``"TBD"`` count as unset"""
        return _number(v)

    @field_validator("fab_daily_overrides", mode="before")
    @classmethod
    def tolerant_overrides(cls, v: Any) -> Any:
        return _drop_bad_hours(v)


class ProductionEntry(_Record):
    """Manually entered production load."""

    id: Optional[str] = None
    project_name: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    total_hours: Optional[float] = None
    overrides: Optional[dict[str, float]] = None

    @field_validator("total_hours", mode="before")
    @classmethod
    def tolerant_hours(cls, v: Any) -> Optional[float]:
        return _number(v)

    @field_validator("overrides", mode="before")
    @classmethod
    def tolerant_overrides(cls, v: Any) -> Any:
        return _drop_bad_hours(v)


def fab_hours(project: ProjectRecord) -> float:
    """First positive of fab hours, remaining shop hours, estimated shop hours."""
    for hours in (
        project.fab_hours,
        project.remaining_shop_hours,
        project.estimated_shop_hours_total,
    ):
        if hours is not None and math.isfinite(hours) and hours > 0:
            return float(hours)
    return 0.0


def project_load(project: ProjectRecord) -> Optional[Load]:
    if project.archived or not project.id:
        return None
    if (project.status or "").lower() not in SCHEDULABLE_STATUSES:
        return None
    hours = fab_hours(project)
    start = project.fab_window_start or project.projected_start_date or project.decision_date
    if hours <= 0 or not start:
        logger.debug("Project %s has no hours or start date; not scheduled.", project.id)
        return None
    return Load(
        id=project.id,
        name=project.project_name or UNTITLED_PROJECT,
        total_hours=hours,
        start_date=start,
        end_date=project.fab_window_end or None,
        overrides=project.fab_daily_overrides or {},
        kind="project",
    )


def entry_load(entry: ProductionEntry) -> Optional[Load]:
    if not entry.id or not entry.start_date or not entry.total_hours or entry.total_hours <= 0:
        return None
    return Load(
        id=entry.id,
        name=entry.project_name or "",
        total_hours=entry.total_hours,
        start_date=entry.start_date,
        end_date=entry.end_date or None,
        overrides=entry.overrides or {},
        kind="manual",
    )


def collect_loads(
    projects: Iterable[Union[ProjectRecord, Mapping[str, Any]]] = (),
    entries: Iterable[Union[ProductionEntry, Mapping[str, Any]]] = (),
) -> list[Load]:
    """
    Project loads first, then manual entries, each in input order.

    A record that fails validation is logged and skipped; the rest of the
    batch is still scheduled.
    """
    loads: list[Load] = []
    for raw in projects:
        record = validate_record(ProjectRecord, raw)
        load = project_load(record) if record is not None else None
        if load is not None:
            loads.append(load)
    for raw in entries:
        record = validate_record(ProductionEntry, raw)
        load = entry_load(record) if record is not None else None
        if load is not None:
            loads.append(load)
    return loads


def validate_record(model: type[_Record], raw: Any) -> Optional[Any]:
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        record_id = raw.get("id") if isinstance(raw, Mapping) else getattr(raw, "id", None)
        logger.warning(
            "Skipping malformed %s %r: %d validation error(s).",
            model.__name__, record_id, exc.error_count(),
        )
        return None


# ── override editing ──────────────────────────────────────────────────────────

def apply_override(
    overrides: Optional[Mapping[str, float]],
    day: Union[str, date],
    raw_value: Union[str, float, None],
) -> dict[str, float]:
    """
    Return a copy of ``overrides`` with one day pinned or cleared.

    Blank, non-numeric, non-finite or negative values clear the pin.
    """
    key = day.isoformat() if isinstance(day, date) else day
    updated = dict(overrides or {})
    hours = _parse_hours(raw_value)
    if hours is None:
        updated.pop(key, None)
    else:
        updated[key] = hours
    return updated


def _parse_hours(raw_value: Union[str, float, None]) -> Optional[float]:
    if raw_value is None:
        return None
    if isinstance(raw_value, str):
        raw_value = raw_value.strip()
        if not raw_value:
            return None
    try:
        hours = float(raw_value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(hours) or hours < 0:
        return None
    return hours


# ── window feasibility ────────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class WindowCheck:
    working_days: int
    max_hours: float

    @property
    def feasible(self) -> bool:
        return self.working_days > 0

    def overbooks(self, total_hours: float) -> bool:
        return self.feasible and total_hours > self.max_hours


def check_window(
    start: Union[str, date], end: Union[str, date], calendar: Calendar
) -> WindowCheck:
    """Working days and hour ceiling of a bounded window, for validating host input."""
    first, last = parse_date(start), parse_date(end)
    if first is None or last is None:
        return WindowCheck(working_days=0, max_hours=0.0)
    days = calendar.count_working_days(first, last)
    return WindowCheck(working_days=days, max_hours=days * calendar.daily_capacity)
