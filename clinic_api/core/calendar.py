"""Clinic calendar: bookable slots, clinic-local "today" and notice windows."""

from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from clinic_api.config import settings

# Consultation slots offered every open day, morning and evening sessions
TIME_SLOTS: tuple[str, ...] = (
    "10:30 AM",
    "11:00 AM",
    "11:30 AM",
    "12:00 PM",
    "12:30 PM",
    "01:00 PM",
    "01:30 PM",
    "02:00 PM",
    "06:00 PM",
    "06:30 PM",
    "07:00 PM",
    "07:30 PM",
    "08:00 PM",
    "08:30 PM",
    "09:00 PM",
)

SUNDAY = 6

NOTICE_DAYS_BEFORE = 2
NOTICE_DAYS_AFTER = 1


def clinic_tz() -> ZoneInfo:
    """Timezone the clinic calendar is kept in."""
    return ZoneInfo(settings.clinic_timezone)


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(UTC)


def clinic_today(now: datetime | None = None) -> date:
    """Calendar date at the clinic for ``now`` (defaults to the current time)."""
    now = now or utc_now()
    return as_utc(now).astimezone(clinic_tz()).date()


def clinic_midnight(day: date) -> datetime:
    """Start of ``day`` at the clinic, expressed in UTC."""
    return datetime.combine(day, time.min, tzinfo=clinic_tz()).astimezone(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalise a datetime to aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def notice_window(day: date) -> tuple[datetime, datetime]:
    """
    Display window of the public notice for a blocked ``day``.

    Runs from clinic midnight two days before the blocked day to clinic
    midnight the day after it.

    Args:
        day: Blocked calendar date

    Returns:
        (start, end) as aware UTC datetimes
    """
    start = clinic_midnight(day - timedelta(days=NOTICE_DAYS_BEFORE))
    end = clinic_midnight(day + timedelta(days=NOTICE_DAYS_AFTER))
    return start, end


def is_sunday(day: date) -> bool:
    """The hospital is closed on Sundays."""
    return day.weekday() == SUNDAY


def week_start(day: date) -> date:
    """First day of the dashboard week (weeks start on Sunday)."""
    return day - timedelta(days=(day.weekday() + 1) % 7)
