"""Blocked date schemas for request/response validation."""

from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AfterValidator, Field, computed_field, field_validator

from clinic_api.core.calendar import TIME_SLOTS, notice_window
from clinic_api.schemas.common import CamelModel, IsoDate, UtcDatetime

REASON_MAX_LENGTH = 50


def _check_reason(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Reason is required")
    if len(value) > REASON_MAX_LENGTH:
        raise ValueError("Reason must be 10 words or less")
    return value


Reason = Annotated[str, AfterValidator(_check_reason)]


def _check_time_slots(value: list[str] | None) -> list[str]:
    """Keep known slots in the order given, dropping repeats."""
    slots: list[str] = []
    for slot in value or []:
        if slot not in TIME_SLOTS:
            raise ValueError(f"Invalid time slot: {slot}")
        if slot not in slots:
            slots.append(slot)
    return slots


class BlockedDateCreate(CamelModel):
    """Schema for blocking a date or some of its slots."""

    date: IsoDate
    time_slots: list[str] | None = None
    reason: Reason

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, v: list[str] | None) -> list[str]:
        """Validate slot labels against the clinic calendar."""
        return _check_time_slots(v)


class BlockedDateUpdate(CamelModel):
    """Schema for a partial update of a blocked date."""

    reason: Reason | None = None
    is_active: bool | None = None
    time_slots: list[str] | None = None

    @field_validator("time_slots")
    @classmethod
    def validate_time_slots(cls, v: list[str] | None) -> list[str] | None:
        """Validate slot labels against the clinic calendar."""
        if v is None:
            return None
        return _check_time_slots(v)


class BlockedDateResponse(CamelModel):
    """Schema for blocked date response."""

    id: UUID
    date: date
    time_slots: list[str]
    reason: str
    blocked_by: str
    blocked_by_name: str
    is_active: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime

    @computed_field(alias="notificationStartDate")  # type: ignore[prop-decorator]
    @property
    def notification_start_date(self) -> datetime:
        """First moment the public notice for this block is shown."""
        return notice_window(self.date)[0]

    @computed_field(alias="notificationEndDate")  # type: ignore[prop-decorator]
    @property
    def notification_end_date(self) -> datetime:
        """Last moment the public notice for this block is shown."""
        return notice_window(self.date)[1]


class BlockedDateFilters(CamelModel):
    """Schema for blocked date filtering."""

    start_date: date | None = None
    end_date: date | None = None
    is_active: bool | None = None


class BlockedDayInfo(CamelModel):
    """What the booking calendar needs to know about one blocked day."""

    reason: str
    time_slots: list[str] = Field(default_factory=list)
    is_full_day_blocked: bool


class DateRange(CamelModel):
    """Inclusive date range echoed back to the caller."""

    start_date: date
    end_date: date


class BlockedDateRangeResponse(CamelModel):
    """Active blocks in a range, keyed by ``YYYY-MM-DD``."""

    success: bool = True
    data: dict[str, BlockedDayInfo]
    count: int
    range: DateRange

