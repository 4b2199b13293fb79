"""Date manipulation utilities"""

import math
from datetime import date, datetime


def to_calendar_date(value: date | datetime) -> date:
    """Drop the time-of-day component"""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole days between two instants, rounded up, never less than 1"""
    if isinstance(start, datetime) != isinstance(end, datetime):
        start, end = to_calendar_date(start), to_calendar_date(end)
    if isinstance(start, datetime):
        seconds = abs((end - start).total_seconds())
    else:
        seconds = abs((end - start).days) * 86400
    return max(1, math.ceil(seconds / 86400))


def window_days(first: date | datetime, last: date | datetime) -> int:
    """Day-span used to scale totals: days_between + 1"""
    return days_between(first, last) + 1


def clamp_days(value: float | None, low: int, high: int, default: int) -> int:
    """Clamp a lookback window into [low, high]; None falls back to default"""
    if value is None:
        return default
    return int(max(low, min(high, value)))
