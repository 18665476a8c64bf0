"""Unit tests for date helpers"""

from datetime import date, datetime, timedelta, timezone
from welth_engine.utils.date_utils import (
    as_utc,
    days_ago,
    is_same_month,
    months_passed,
    subtract_calendar_months,
)


def test_as_utc_treats_naive_as_utc():
    naive = datetime(2026, 1, 2, 3, 4)
    assert as_utc(naive) == datetime(2026, 1, 2, 3, 4, tzinfo=timezone.utc)


def test_as_utc_converts_offsets_and_dates():
    plus_two = timezone(timedelta(hours=2))
    assert as_utc(datetime(2026, 1, 2, 3, 0, tzinfo=plus_two)).hour == 1
    assert as_utc(date(2026, 1, 2)) == datetime(2026, 1, 2, tzinfo=timezone.utc)


def test_days_ago_mixes_naive_and_aware():
    now = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)
    assert days_ago(datetime(2026, 3, 14, 0, 0), now) == 1.5
    assert days_ago(now + timedelta(days=2), now) == -2


def test_months_passed_floors_30_day_periods():
    now = datetime(2026, 3, 15, tzinfo=timezone.utc)
    assert months_passed(now - timedelta(days=29), now) == 0
    assert months_passed(now - timedelta(days=30), now) == 1
    assert months_passed(now - timedelta(days=91), now) == 3


def test_subtract_calendar_months_crosses_year_and_clamps():
    assert subtract_calendar_months(datetime(2026, 2, 10), 3) == datetime(2025, 11, 10)
    assert subtract_calendar_months(datetime(2024, 5, 31), 3) == datetime(2024, 2, 29)


def test_is_same_month_checks_year():
    now = datetime(2026, 3, 15, tzinfo=timezone.utc)
    assert is_same_month(datetime(2026, 3, 1), now)
    assert not is_same_month(datetime(2025, 3, 15), now)
