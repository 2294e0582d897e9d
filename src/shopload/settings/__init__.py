"""
shopload.settings
~~~~~~~~~~~~~~~~~

Scheduler configuration.  Values come from ``SHOPLOAD_*`` environment
variables (or a ``.env`` file), from keyword arguments, or from the host's
camelCase company-settings document::

    from shopload.settings import ScheduleSettings

    settings = ScheduleSettings.from_company_settings(
        {"shopCapacityHoursPerWeek": 400, "holidays": ["2025-12-25"]}
    )
    cal = settings.calendar()
"""

from shopload.settings.settings import ScheduleSettings

__all__ = ["ScheduleSettings"]
