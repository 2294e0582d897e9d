"""
tests/capacity/test_aggregate.py

Covers:
  - Daily totals across loads (sums, contribution order, date order)
  - Order independence of totals
  - Duplicate load keys
  - Weekly rollup (Monday weeks, working days only, breakdown, capacity)
"""

import logging
from datetime import date

import pytest

from shopload.allocation import Load
from shopload.calendar import Calendar
from shopload.capacity import (
    Contribution,
    DailyTotal,
    WeeklySummary,
    aggregate,
    allocate_all,
    summarize_weeks,
)

MON = date(2025, 3, 3)


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def work_week():
    return Calendar(daily_capacity=8)


@pytest.fixture
def loads():
    return [
        Load("a", "Rails", 40.0, "2025-03-03", "2025-03-07", kind="project"),
        Load("b", "Stairs", 16.0, "2025-03-03", "2025-03-04"),
        Load("c", "Canopy", 20.0, "2025-03-10"),
    ]


# ── Daily totals ──────────────────────────────────────────────────────────────

class TestAggregate:

    def test_totals_sum_contributions(self, work_week, loads):
        daily, _ = aggregate(loads, work_week)
        assert daily["2025-03-03"].total == pytest.approx(16.0)
        assert daily["2025-03-05"].total == pytest.approx(8.0)
        assert daily["2025-03-12"].total == pytest.approx(4.0)

    def test_contributions_in_load_order(self, work_week, loads):
        daily, _ = aggregate(loads, work_week)
        assert [c.key for c in daily["2025-03-03"].loads] == ["project-a", "manual-b"]
        assert daily["2025-03-03"].loads[1] == Contribution("manual-b", "Stairs", 8.0)

    def test_days_in_date_order(self, work_week, loads):
        daily, _ = aggregate(reversed(loads), work_week)
        assert list(daily) == sorted(daily)

    def test_allocations_keyed_by_load(self, work_week, loads):
        _, allocations = aggregate(loads, work_week)
        assert list(allocations) == ["project-a", "manual-b", "manual-c"]
        assert sum(allocations["manual-c"].values()) == pytest.approx(20.0)

    def test_total_matches_contributions(self, work_week, loads):
        daily, _ = aggregate(loads, work_week)
        for entry in daily.values():
            assert entry.total == pytest.approx(sum(c.hours for c in entry.loads))

    def test_order_independent_totals(self, work_week, loads):
        forward, _ = aggregate(loads, work_week)
        backward, _ = aggregate(list(reversed(loads)), work_week)
        assert forward.keys() == backward.keys()
        for day in forward:
            assert forward[day].total == pytest.approx(backward[day].total)

    def test_empty(self, work_week):
        assert aggregate([], work_week) == ({}, {})

    def test_unschedulable_load_contributes_nothing(self, work_week):
        daily, allocations = aggregate([Load("x", "Nothing", 0.0, "2025-03-03")], work_week)
        assert daily == {}
        assert allocations == {"manual-x": {}}

    def test_duplicate_key_warns(self, work_week, caplog):
        twins = [Load("a", "One", 8.0, "2025-03-03"), Load("a", "Two", 8.0, "2025-03-04")]
        with caplog.at_level(logging.WARNING, logger="shopload.capacity.aggregate"):
            aggregate(twins, work_week)
        assert "Duplicate load key manual-a" in caplog.text

    def test_duplicate_key_totals_match_allocations(self, work_week):
        twins = [Load("a", "One", 8.0, "2025-03-03"), Load("a", "Two", 8.0, "2025-03-04")]
        daily, allocations = aggregate(twins, work_week)
        assert list(allocations["manual-a"]) == ["2025-03-03"]
        assert list(daily) == ["2025-03-03"]
        assert [c.name for c in daily["2025-03-03"].loads] == ["One"]

    def test_allocate_all_keeps_first_duplicate(self, work_week):
        twins = [Load("a", "One", 8.0, "2025-03-03"), Load("a", "Two", 8.0, "2025-03-04")]
        assert allocate_all(twins, work_week) == {"manual-a": {"2025-03-03": 8.0}}

    def test_allocate_all(self, work_week, loads):
        allocations = allocate_all(loads, work_week)
        assert allocations["project-a"] == {
            d: pytest.approx(8.0)
            for d in ("2025-03-03", "2025-03-04", "2025-03-05", "2025-03-06", "2025-03-07")
        }


# ── Weekly rollup ─────────────────────────────────────────────────────────────

class TestSummarizeWeeks:

    def test_week_totals(self, work_week, loads):
        daily, _ = aggregate(loads, work_week)
        weeks = summarize_weeks(daily, work_week, MON, 3)
        assert [w.used_hours for w in weeks] == pytest.approx([56.0, 20.0, 0.0])
        assert [w.capacity_hours for w in weeks] == pytest.approx([40.0, 40.0, 40.0])

    def test_week_bounds(self, work_week):
        weeks = summarize_weeks({}, work_week, MON, 2)
        assert (weeks[0].start_date, weeks[0].end_date) == (MON, date(2025, 3, 9))
        assert weeks[1].start_date == date(2025, 3, 10)
        assert [w.week_index for w in weeks] == [0, 1]

    def test_midweek_start_normalised(self, work_week):
        assert summarize_weeks({}, work_week, date(2025, 3, 6), 1)[0].start_date == MON

    def test_breakdown_sorted_descending(self, work_week, loads):
        daily, _ = aggregate(loads, work_week)
        week = summarize_weeks(daily, work_week, MON, 1)[0]
        assert [(p.key, p.name) for p in week.projects] == [
            ("project-a", "Rails"),
            ("manual-b", "Stairs"),
        ]
        assert [p.hours for p in week.projects] == pytest.approx([40.0, 16.0])

    def test_zero_hour_contributions_hidden(self, work_week):
        daily = {"2025-03-03": DailyTotal(0.0, [Contribution("manual-z", "Zero", 0.0)])}
        week = summarize_weeks(daily, work_week, MON, 1)[0]
        assert week.projects == ()

    def test_non_working_days_ignored(self, work_week):
        daily = {
            "2025-03-04": DailyTotal(5.0, [Contribution("manual-a", "A", 5.0)]),
            "2025-03-08": DailyTotal(9.0, [Contribution("manual-a", "A", 9.0)]),
        }
        assert summarize_weeks(daily, work_week, MON, 1)[0].used_hours == pytest.approx(5.0)

    def test_holiday_reduces_capacity(self):
        cal = Calendar(daily_capacity=8, holidays=["2025-03-05"])
        assert summarize_weeks({}, cal, MON, 1)[0].capacity_hours == pytest.approx(32.0)

    def test_configured_weekly_capacity(self):
        cal = Calendar(weekly_capacity=400)
        assert summarize_weeks({}, cal, MON, 1)[0].capacity_hours == pytest.approx(400.0)

    def test_zero_weeks(self, work_week):
        assert summarize_weeks({}, work_week, MON, 0) == []


class TestWeeklySummary:

    def test_utilization(self):
        s = WeeklySummary(0, MON, date(2025, 3, 9), used_hours=30.0, capacity_hours=40.0)
        assert s.utilization == pytest.approx(0.75)
        assert s.available_hours == pytest.approx(10.0)

    def test_zero_capacity_utilization(self):
        s = WeeklySummary(0, MON, date(2025, 3, 9), used_hours=30.0, capacity_hours=0.0)
        assert s.utilization == 0.0
