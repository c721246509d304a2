# tests/test_periods.py
from datetime import datetime, timezone

import pytest

from app.services.periods import period_bounds


def test_last_month_runs_to_day_zero_of_this_month():
    start, end = period_bounds("lastMonth", datetime(2024, 3, 15, 9, 41))
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 2, 29)


def test_last_month_in_january_is_previous_december():
    start, end = period_bounds("lastMonth", datetime(2025, 1, 10))
    assert start == datetime(2024, 12, 1)
    assert end == datetime(2024, 12, 31)


def test_this_month_has_no_end():
    assert period_bounds("thisMonth", datetime(2024, 3, 15, 23, 59)) == (datetime(2024, 3, 1), None)


def test_this_year_starts_january_first():
    assert period_bounds("thisYear", datetime(2024, 8, 20)) == (datetime(2024, 1, 1), None)


def test_bounds_keep_the_clock_time_zone():
    start, end = period_bounds("lastMonth", datetime(2024, 3, 15, tzinfo=timezone.utc))
    assert start == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert end.tzinfo is timezone.utc


@pytest.mark.parametrize("period", ["", "lastWeek", "THISMONTH"])
def test_unknown_period_has_no_bounds(period):
    assert period_bounds(period, datetime(2024, 3, 15)) == (None, None)
