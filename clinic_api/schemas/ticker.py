"""Ticker notification schemas."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import Field, ValidationInfo, field_validator

from clinic_api.schemas.common import CamelModel, UtcDatetime

BLOCKED_DATE_PRIORITY = 1


class TickerNotificationType(str, Enum):
    """Ticker notification type enumeration."""

    BLOCKED_DATE = "blocked_date"
    EMERGENCY = "emergency"


class TickerNotificationResponse(CamelModel):
    """Schema for a notice as shown to visitors."""

    id: UUID
    message: str
    type: TickerNotificationType
    start_date: UtcDatetime
    end_date: UtcDatetime
    is_active: bool
    priority: int
    related_blocked_date_id: UUID | None = None


class EmergencyNoticeCreate(CamelModel):
    """Schema for posting an emergency notice (admin only)."""

    message: str = Field(..., min_length=1, max_length=200)
    start_date: UtcDatetime
    end_date: UtcDatetime
    priority: int = Field(default=5, ge=1, le=10)

    @field_validator("end_date")
    @classmethod
    def validate_end_date(cls, v: datetime, info: ValidationInfo) -> datetime:
        """Validate end is after start."""
        start = info.data.get("start_date")
        if start and v <= start:
            raise ValueError("End date must be after start date")
        return v


class TickerCleanupResponse(CamelModel):
    """Schema for the expired notice purge."""

    success: bool = True
    message: str
    deleted_count: int
