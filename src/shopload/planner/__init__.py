"""
shopload.planner
~~~~~~~~~~~~~~~~

One call from host records to a full capacity report::

    from datetime import date
    from shopload.planner import Planner
    from shopload.settings import ScheduleSettings

    planner = Planner(ScheduleSettings(shop_capacity_hours_per_week=400))
    report  = planner.from_records(projects, entries, start=date(2025, 3, 3))
    report.gaps_current, report.overloads
"""

from shopload.planner.planner import Planner, PlanReport

__all__ = ["Planner", "PlanReport"]
