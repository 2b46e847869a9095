"""Appointment schemas for request/response validation."""

from datetime import date
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from clinic_api.schemas.common import CamelModel, IsoDate, UtcDatetime


class AppointmentStatus(str, Enum):
    """Appointment status enumeration."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


# Older dashboard builds send "visited" for an attended appointment
LEGACY_STATUS_ALIASES = {"visited": AppointmentStatus.COMPLETED.value}


class AppointmentCreate(CamelModel):
    """Schema for the public booking form."""

    name: str = Field(..., min_length=2, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=20)
    service: str = Field(..., min_length=1, max_length=200)
    date: IsoDate
    time: str = Field(..., min_length=1, max_length=20)
    message: str | None = Field(None, max_length=1000)
    captcha_token: str = Field(..., min_length=1)

    @field_validator("name", "service")
    @classmethod
    def strip_text(cls, v: str) -> str:
        """Trim surrounding whitespace."""
        return v.strip()

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        """Validate phone number format."""
        # Remove common separators
        cleaned = (
            v.replace("-", "").replace(" ", "").replace("(", "").replace(")", "").replace("+", "")
        )
        if not cleaned.isdigit():
            raise ValueError("Phone number must contain only digits and separators")
        if len(cleaned) < 10:
            raise ValueError("Please enter a valid phone number.")
        return v


class AppointmentStatusUpdate(CamelModel):
    """Schema for updating appointment status."""

    status: AppointmentStatus

    @field_validator("status", mode="before")
    @classmethod
    def map_legacy_status(cls, v: Any) -> Any:
        """Accept legacy status names."""
        if isinstance(v, str):
            return LEGACY_STATUS_ALIASES.get(v, v)
        return v


class AppointmentResponse(CamelModel):
    """Schema for appointment response."""

    id: UUID
    name: str
    email: str
    phone: str
    service: str
    date: date
    time: str
    message: str | None = None
    status: AppointmentStatus
    created_at: UtcDatetime
    updated_at: UtcDatetime


class AppointmentFilters(CamelModel):
    """Schema for appointment filtering."""

    status: AppointmentStatus | None = None
    appointment_date: date | None = Field(None, alias="date")
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=200)


class AppointmentListResponse(CamelModel):
    """Schema for paginated appointment list response."""

    success: bool = True
    data: list[AppointmentResponse]
    count: int
    total: int
    page: int
    page_size: int
