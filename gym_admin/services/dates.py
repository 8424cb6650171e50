"""
services/dates.py
─────────────────────────────────────────────────────────────────────
Calendar helpers shared by member creation, renewal, the status
reconciler and the reports. All arithmetic is date-only (no time of day).
"""

from __future__ import annotations

import calendar
import datetime
from typing import Optional

from django.utils import timezone
from django.utils.dateparse import parse_date as _django_parse_date


def add_months(start: datetime.date, months: int) -> datetime.date:
    """
    Calendar-month addition, clamped to the last day of the target month.

        add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    """
    month_index = start.month - 1 + months
    year  = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return datetime.date(year, month, min(start.day, last_day))


def today() -> datetime.date:
    """Current date in the configured TIME_ZONE."""
    return timezone.localdate()


def parse_date(value, field: str = "date") -> Optional[datetime.date]:
    """
    Accepts a date, a datetime or an ISO string (YYYY-MM-DD). Empty
    values return None; anything unparseable raises ValueError naming
    the field.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        parsed = _django_parse_date(str(value)[:10])
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValueError(f"{field} must be a date in YYYY-MM-DD format")
    return parsed


def next_birthday(dob: datetime.date, on_or_after: datetime.date) -> datetime.date:
    """
    The next anniversary of `dob` falling on or after `on_or_after`.
    Feb 29 birthdays fall on Feb 28 in non-leap years.
    """
    def _in_year(year: int) -> datetime.date:
        if dob.month == 2 and dob.day == 29 and not calendar.isleap(year):
            return datetime.date(year, 2, 28)
        return datetime.date(year, dob.month, dob.day)

    candidate = _in_year(on_or_after.year)
    if candidate < on_or_after:
        candidate = _in_year(on_or_after.year + 1)
    return candidate


def age_on(dob: datetime.date, on: datetime.date) -> int:
    return on.year - dob.year - ((on.month, on.day) < (dob.month, dob.day))

