"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone

SECONDS_PER_DAY = 60 * 60 * 24
MONTH_APPROX_DAYS = 30


def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime | date) -> datetime:
    """Normalise dates and naive datetimes to aware UTC (naive values are assumed UTC)"""
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_ago(moment: datetime, now: datetime) -> float:
    """Fractional days elapsed from moment to now (negative for future moments)"""
    return (as_utc(now) - as_utc(moment)).total_seconds() / SECONDS_PER_DAY


def months_passed(start: datetime, now: datetime) -> int:
    """Whole 30-day months elapsed since start, floored"""
    return (as_utc(now) - as_utc(start)) // timedelta(days=MONTH_APPROX_DAYS)


def subtract_calendar_months(moment: datetime, months: int) -> datetime:
    """Same wall-clock instant `months` calendar months earlier, clamped to month end"""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def is_same_month(moment: datetime, now: datetime) -> bool:
    """True when both instants fall in the same calendar year and month (UTC)"""
    moment, now = as_utc(moment), as_utc(now)
    return (moment.year, moment.month) == (now.year, now.month)
