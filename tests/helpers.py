"""Date helpers shared by the test modules."""

from datetime import date, timedelta

from clinic_api.core.calendar import clinic_today, is_sunday


def open_day(days_ahead: int = 1) -> date:
    """First day the clinic is open at least ``days_ahead`` days from today."""
    day = clinic_today() + timedelta(days=days_ahead)
    while is_sunday(day):
        day += timedelta(days=1)
    return day


def next_sunday(days_ahead: int = 1) -> date:
    """First Sunday at least ``days_ahead`` days from today."""
    day = clinic_today() + timedelta(days=days_ahead)
    while not is_sunday(day):
        day += timedelta(days=1)
    return day
