"""
tests/settings/test_settings.py

Covers:
  - Defaults
  - Comma-separated lists and blank handling
  - Environment variables (SHOPLOAD_ prefix)
  - Validation bounds
  - Host settings document (camelCase)
  - Calendar construction
"""

from datetime import date

import pytest
from pydantic import ValidationError

from shopload.settings import ScheduleSettings


def settings(**kw):
    return ScheduleSettings(_env_file=None, **kw)


# ── Defaults ──────────────────────────────────────────────────────────────────

class TestDefaults:

    def test_defaults(self):
        s = settings()
        assert s.working_days == ["mon", "tue", "wed", "thu", "fri"]
        assert s.holidays == []
        assert s.shop_capacity_hours_per_day is None
        assert s.shop_capacity_hours_per_week is None
        assert s.backlog_forecast_weeks == 24
        assert s.under_utilized_threshold == 0.7
        assert s.current_period_weeks == 4

    def test_default_calendar(self):
        cal = settings().calendar()
        assert cal.daily_capacity == 8.0
        assert cal.weekly_capacity == pytest.approx(40.0)


# ── Lists ─────────────────────────────────────────────────────────────────────

class TestLists:

    def test_comma_separated_days(self):
        assert settings(working_days="mon, wed ,fri").working_days == ["mon", "wed", "fri"]

    def test_empty_days_mean_default(self):
        assert settings(working_days=[]).working_days == ["mon", "tue", "wed", "thu", "fri"]
        assert settings(working_days="").working_days == ["mon", "tue", "wed", "thu", "fri"]

    def test_holidays_blank_entries_dropped(self):
        assert settings(holidays=["2025-12-25", "", "  "]).holidays == ["2025-12-25"]

    def test_comma_separated_holidays(self):
        assert settings(holidays="2025-12-25,2025-12-26").holidays == ["2025-12-25", "2025-12-26"]


# ── Environment ───────────────────────────────────────────────────────────────

class TestEnvironment:

    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("SHOPLOAD_SHOP_CAPACITY_HOURS_PER_WEEK", "400")
        monkeypatch.setenv("SHOPLOAD_BACKLOG_FORECAST_WEEKS", "12")
        s = settings()
        assert s.shop_capacity_hours_per_week == 400.0
        assert s.backlog_forecast_weeks == 12

    def test_comma_separated_from_env(self, monkeypatch):
        monkeypatch.setenv("SHOPLOAD_WORKING_DAYS", "mon,tue,wed,thu")
        assert settings().working_days == ["mon", "tue", "wed", "thu"]

    def test_arguments_beat_environment(self, monkeypatch):
        monkeypatch.setenv("SHOPLOAD_CURRENT_PERIOD_WEEKS", "8")
        assert settings(current_period_weeks=2).current_period_weeks == 2


# ── Validation ────────────────────────────────────────────────────────────────

class TestValidation:

    @pytest.mark.parametrize(
        "field, value",
        [
            ("under_utilized_threshold", 1.5),
            ("under_utilized_threshold", -0.1),
            ("shop_capacity_hours_per_day", -8),
            ("backlog_forecast_weeks", -1),
            ("max_open_ended_days", 0),
        ],
    )
    def test_out_of_range(self, field, value):
        with pytest.raises(ValidationError):
            settings(**{field: value})


# ── Host settings ─────────────────────────────────────────────────────────────

class TestCompanySettings:

    def test_camel_case_document(self):
        s = ScheduleSettings.from_company_settings(
            {
                "workingDays": ["mon", "tue", "wed", "thu"],
                "holidays": ["2025-12-25"],
                "shopCapacityHoursPerDay": 10,
                "backlogForecastWeeks": 8,
                "underUtilizedThreshold": 0.5,
                "companyName": "Acme Steel",
            },
            _env_file=None,
        )
        assert s.working_days == ["mon", "tue", "wed", "thu"]
        assert s.holidays == ["2025-12-25"]
        assert s.shop_capacity_hours_per_day == 10.0
        assert s.backlog_forecast_weeks == 8
        assert s.under_utilized_threshold == 0.5

    def test_missing_and_null_keys_use_defaults(self):
        s = ScheduleSettings.from_company_settings(
            {"shopCapacityHoursPerWeek": None}, _env_file=None
        )
        assert s.shop_capacity_hours_per_week is None
        assert s.backlog_forecast_weeks == 24

    def test_keyword_overrides(self):
        s = ScheduleSettings.from_company_settings(
            {"backlogForecastWeeks": 8}, backlog_forecast_weeks=2, _env_file=None
        )
        assert s.backlog_forecast_weeks == 2


# ── Calendar ──────────────────────────────────────────────────────────────────

class TestCalendar:

    def test_calendar_reflects_settings(self):
        cal = settings(
            working_days="mon,tue,wed,thu",
            holidays=["2025-03-05"],
            shop_capacity_hours_per_week=400,
        ).calendar()
        assert cal.working_days == ("mon", "tue", "wed", "thu")
        assert not cal.is_working_day(date(2025, 3, 5))
        assert cal.daily_capacity == pytest.approx(100.0)

    def test_bad_weekday_surfaces_on_calendar(self):
        from shopload.calendar import CalendarError

        with pytest.raises(CalendarError):
            settings(working_days="mon,funday").calendar()
