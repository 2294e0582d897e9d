"""
shopload.capacity
~~~~~~~~~~~~~~~~~

Shop load against capacity: daily totals across loads, weekly rollups,
utilization classes, and the week-bucket backlog forecast.

Basic usage::

    from datetime import date
    from shopload.allocation import Load
    from shopload.calendar import Calendar
    from shopload.capacity import aggregate, classify, summarize_weeks

    cal = Calendar(daily_capacity=8)
    daily, allocations = aggregate([Load("a", "Rails", 40, "2025-03-03", "2025-03-07")], cal)
    weeks = summarize_weeks(daily, cal, date(2025, 3, 3), 4)
    classify(weeks[0])                                     # → Utilization.OPTIMAL

Backlog forecast::

    from shopload.capacity import build_forecast

    forecast = build_forecast(projects, weekly_capacity=400, weeks=12)
    forecast.backlog_months
"""

from shopload.capacity.aggregate import (
    Contribution,
    DailyTotal,
    ProjectHours,
    WeeklySummary,
    aggregate,
    allocate_all,
    summarize_weeks,
)
from shopload.capacity.forecast import (
    Bucket,
    BucketProject,
    Recommendation,
    ShopLoadForecast,
    WeeklyCapacity,
    build_forecast,
)
from shopload.capacity.utilization import (
    DEFAULT_THRESHOLD,
    Utilization,
    classify,
    day_status,
    find_gaps,
    find_overloads,
    split_current,
    utilization_of,
)

__all__ = [
    "Bucket",
    "BucketProject",
    "Contribution",
    "DEFAULT_THRESHOLD",
    "DailyTotal",
    "ProjectHours",
    "Recommendation",
    "ShopLoadForecast",
    "Utilization",
    "WeeklyCapacity",
    "WeeklySummary",
    "aggregate",
    "allocate_all",
    "build_forecast",
    "classify",
    "day_status",
    "find_gaps",
    "find_overloads",
    "split_current",
    "summarize_weeks",
    "utilization_of",
]
