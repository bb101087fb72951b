"""
Date helpers.

All wall-clock arithmetic happens in a single configured timezone. Naive
values are interpreted in that timezone, aware values are converted to it.
"""

from datetime import date, datetime

import pendulum
from pendulum import DateTime


def to_datetime(value: datetime, tz: str) -> DateTime:
    """Convert a stdlib or pendulum datetime to a pendulum DateTime in tz."""
    return pendulum.instance(value, tz=tz).in_timezone(tz)


def start_of_day(value: date, tz: str) -> DateTime:
    """Midnight of the calendar day of value, in tz."""
    if isinstance(value, datetime):
        return to_datetime(value, tz).start_of("day")
    return pendulum.datetime(value.year, value.month, value.day, tz=tz)


def end_of_day(day: DateTime) -> DateTime:
    """Last millisecond of the day (23:59:59.999)."""
    return day.set(hour=23, minute=59, second=59, microsecond=999000)
