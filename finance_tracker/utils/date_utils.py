"""Date manipulation utilities"""

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative if end is earlier)"""
    return (end - start).days


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Calendar month arithmetic; day clamps to the end of shorter months"""
    return from_date + relativedelta(months=months)


def is_same_month(value: date, reference: date) -> bool:
    return value.year == reference.year and value.month == reference.month
