"""Unit tests for date helpers"""

from datetime import date, datetime
from spend_insights.utils.date_utils import clamp_days, days_between, to_calendar_date, window_days


def test_days_between_rounds_partial_days_up():
    assert days_between(datetime(2024, 1, 1, 9), datetime(2024, 1, 3, 10)) == 3
    assert days_between(datetime(2024, 1, 3, 10), datetime(2024, 1, 1, 9)) == 3


def test_days_between_minimum_one():
    moment = datetime(2024, 1, 1, 12)
    assert days_between(moment, moment) == 1
    assert days_between(date(2024, 1, 1), date(2024, 1, 1)) == 1


def test_window_days_adds_one():
    assert window_days(date(2024, 1, 1), date(2024, 1, 31)) == 31


def test_mixed_date_and_datetime():
    assert days_between(date(2024, 1, 1), datetime(2024, 1, 5, 23)) == 4


def test_to_calendar_date():
    assert to_calendar_date(datetime(2024, 5, 6, 23, 59)) == date(2024, 5, 6)
    assert to_calendar_date(date(2024, 5, 6)) == date(2024, 5, 6)


def test_clamp_days():
    assert clamp_days(None, 30, 365, 180) == 180
    assert clamp_days(5, 30, 365, 180) == 30
    assert clamp_days(1000, 30, 365, 180) == 365
    assert clamp_days(45, 30, 365, 180) == 45


def test_clamp_days_accepts_fractional_and_unbounded_values():
    assert clamp_days(45.7, 30, 365, 180) == 45
    assert clamp_days(float("inf"), 30, 365, 180) == 365
    assert clamp_days(-3.5, 7, 180, 90) == 7
