from datetime import date, timedelta
from typing import TypeVar

DateLike = TypeVar("DateLike", bound=date)

WEEKEND = (5, 6)  # Saturday, Sunday


def is_business_day(day: date) -> bool:
    return day.weekday() not in WEEKEND


def business_days_from(start: DateLike, days: int) -> DateLike:
    """
    Steps forward from `start` until `days` weekdays have been counted.

    Weekends never count and are never returned for days >= 1. With
    days == 0 nothing is stepped, so `start` comes back as is, even on a
    Saturday or Sunday. Works on dates and datetimes alike; time of day
    and tzinfo ride along untouched.
    """
    if days < 0:
        raise ValueError(f"business day count must be non-negative, got {days}")

    current = start
    counted = 0
    while counted < days:
        current = current + timedelta(days=1)
        if is_business_day(current):
            counted += 1
    return current
