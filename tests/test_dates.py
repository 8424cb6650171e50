"""
tests/test_dates.py
─────────────────────────────────────────────────────────────────────
Calendar helpers — pure, no database.
"""
from __future__ import annotations

import datetime

import pytest

from gym_admin.services.dates import add_months, age_on, next_birthday, parse_date

D = datetime.date


# ════════════════════════════════════════════════════════════════════
#  add_months
# ════════════════════════════════════════════════════════════════════

class TestAddMonths:

    @pytest.mark.parametrize("start,months,expected", [
        (D(2024, 1, 1),   1, D(2024, 2, 1)),
        (D(2024, 2, 1),   1, D(2024, 3, 1)),
        (D(2024, 1, 31),  1, D(2024, 2, 29)),
        (D(2023, 1, 31),  1, D(2023, 2, 28)),
        (D(2024, 3, 31),  1, D(2024, 4, 30)),
        (D(2024, 11, 15), 3, D(2025, 2, 15)),
        (D(2024, 12, 31), 12, D(2025, 12, 31)),
    ])
    def test_calendar_months(self, start, months, expected):
        assert add_months(start, months) == expected

    def test_zero_months_is_identity(self):
        assert add_months(D(2024, 5, 17), 0) == D(2024, 5, 17)


# ════════════════════════════════════════════════════════════════════
#  parse_date
# ════════════════════════════════════════════════════════════════════

class TestParseDate:

    def test_iso_string(self):
        assert parse_date("2024-02-15") == D(2024, 2, 15)

    def test_datetime_string_is_truncated(self):
        assert parse_date("2024-02-15T10:30:00Z") == D(2024, 2, 15)

    def test_date_passthrough(self):
        assert parse_date(D(2024, 2, 15)) == D(2024, 2, 15)

    def test_datetime_object(self):
        assert parse_date(datetime.datetime(2024, 2, 15, 23, 59)) == D(2024, 2, 15)

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_is_none(self, value):
        assert parse_date(value) is None

    @pytest.mark.parametrize("value", ["15/02/2024", "2024-13-01", "tomorrow"])
    def test_garbage_raises_with_field_name(self, value):
        with pytest.raises(ValueError, match="start_date"):
            parse_date(value, "start_date")


# ════════════════════════════════════════════════════════════════════
#  Birthdays / ages / ranges
# ════════════════════════════════════════════════════════════════════

class TestNextBirthday:

    def test_later_this_year(self):
        assert next_birthday(D(1990, 6, 10), D(2024, 6, 1)) == D(2024, 6, 10)

    def test_today_counts(self):
        assert next_birthday(D(1990, 6, 10), D(2024, 6, 10)) == D(2024, 6, 10)

    def test_already_passed_rolls_to_next_year(self):
        assert next_birthday(D(1990, 1, 5), D(2024, 12, 20)) == D(2025, 1, 5)

    def test_leap_day_in_common_year(self):
        assert next_birthday(D(2000, 2, 29), D(2023, 2, 1)) == D(2023, 2, 28)

    def test_leap_day_in_leap_year(self):
        assert next_birthday(D(2000, 2, 29), D(2024, 2, 1)) == D(2024, 2, 29)


class TestAgeAndRange:

    def test_age_before_birthday(self):
        assert age_on(D(1990, 6, 10), D(2024, 6, 9)) == 33

    def test_age_on_birthday(self):
        assert age_on(D(1990, 6, 10), D(2024, 6, 10)) == 34
