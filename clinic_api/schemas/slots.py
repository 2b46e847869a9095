"""Slot availability schemas."""

from datetime import date

from pydantic import Field

from clinic_api.schemas.common import CamelModel


class SlotAvailability(CamelModel):
    """Bookable slots for one calendar day."""

    date: date
    all_blocked: bool = False
    block_reason: str | None = None
    # Slots taken by a block or a live booking
    booked_slots: list[str] = Field(default_factory=list)
    available_slots: list[str] = Field(default_factory=list)


class SimpleSlotsResponse(CamelModel):
    """Response of the booking form's slot lookup."""

    success: bool = True
    booked_slots: list[str]
    available_slots: list[str]
    all_blocked: bool | None = None
    block_reason: str | None = None


class SlotCheck(CamelModel):
    """Availability of a single slot."""

    date: date
    time: str
    is_available: bool
    is_blocked: bool = False
    block_reason: str | None = None


class DaySlotsSummary(CamelModel):
    """Per-slot availability of a whole day."""

    date: date
    total_slots: int
    available_count: int
    unavailable_count: int
    slots: list[SlotCheck]
