"""Database models."""

from clinic_api.models.appointments import appointments
from clinic_api.models.base import metadata
from clinic_api.models.blocked_dates import blocked_dates
from clinic_api.models.ticker_notifications import ticker_notifications

__all__ = [
    "appointments",
    "blocked_dates",
    "metadata",
    "ticker_notifications",
]
