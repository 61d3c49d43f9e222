"""Date manipulation utilities"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import List


def generate_date_range(start: date, end: date) -> List[date]:
    """Generate list of dates from start to end (inclusive)"""
    days = (end - start).days + 1
    return [start + timedelta(days=i) for i in range(days)]


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """
    Move a date by whole calendar months.

    The day of month is clamped to the last valid day of the target month:
    Jan 31 + 1 month -> Feb 29 (leap year) or Feb 28, Mar 31 + 1 month -> Apr 30.
    """
    month_index = from_date.month - 1 + months
    year = from_date.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(from_date.day, last_day))


def add_years(from_date: date, years: int) -> date:
    """Same month/day in the target year; Feb 29 becomes Feb 28 off leap years"""
    year = from_date.year + years
    if from_date.month == 2 and from_date.day == 29 and not calendar.isleap(year):
        return date(year, 2, 28)
    return from_date.replace(year=year)


def end_of_month(day: date) -> date:
    """Last calendar day of the month containing `day`"""
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


def months_between(start: date, end: date) -> int:
    """Whole calendar months between the months of two dates (day of month ignored)"""
    return (end.year - start.year) * 12 + (end.month - start.month)


def to_iso(day: date) -> str:
    """YYYY-MM-DD key used for per-day lookups"""
    return day.isoformat()


def utc_today() -> date:
    """Current calendar day in UTC. Only the API layer calls this."""
    return datetime.now(timezone.utc).date()
