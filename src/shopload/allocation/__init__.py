"""
shopload.allocation
~~~~~~~~~~~~~~~~~~~

Day-by-day hour allocation for a single load.

A bounded load (start and end date) is spread evenly over the working days of
its window, after reserving the hours that later pinned days need.  An
open-ended load (start date only) runs at the calendar's daily capacity until
its hours are used up.  Pinned days (overrides) are honoured exactly, as far
as the load's remaining hours allow.

Basic usage::

    from shopload.allocation import Load, allocate
    from shopload.calendar import Calendar

    cal  = Calendar()                                   # Mon–Fri, 8 h/day
    load = Load("p1", "Stair rails", 40.0, "2025-03-03", "2025-03-07",
                overrides={"2025-03-07": 20.0})
    allocate(load, cal)
    # → {"2025-03-03": 5.0, ..., "2025-03-06": 5.0, "2025-03-07": 20.0}

Pinning a day from user input::

    from shopload.allocation import apply_override

    overrides = apply_override(load.overrides, "2025-03-04", "6")

Public API
----------
Load              Unit of work to schedule.
allocate          Allocate one load over a calendar.
apply_override    Copy of an override map with one day pinned or cleared.
check_window      Working days / hour ceiling of a bounded window.
collect_loads     Normalise host project records and production entries.
validate_record   Parse one host record, or log and skip it.
"""

from shopload.allocation.allocation import (
    DEFAULT_MAX_DAYS,
    DEFAULT_MAX_LOOKAHEAD,
    allocate,
)
from shopload.allocation.loads import (
    Load,
    ProductionEntry,
    ProjectRecord,
    WindowCheck,
    apply_override,
    check_window,
    collect_loads,
    entry_load,
    fab_hours,
    project_load,
    validate_record,
)

__all__ = [
    "DEFAULT_MAX_DAYS",
    "DEFAULT_MAX_LOOKAHEAD",
    "Load",
    "ProductionEntry",
    "ProjectRecord",
    "WindowCheck",
    "allocate",
    "apply_override",
    "check_window",
    "collect_loads",
    "entry_load",
    "fab_hours",
    "project_load",
    "validate_record",
]
