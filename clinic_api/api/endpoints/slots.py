"""Slot availability endpoints used by the booking form."""

from fastapi import APIRouter, Query, status

from clinic_api.core.exceptions import BadRequestException
from clinic_api.dependencies import DatabaseSession
from clinic_api.schemas.common import parse_iso_date
from clinic_api.schemas.slots import DaySlotsSummary, SimpleSlotsResponse, SlotCheck
from clinic_api.services.slot_service import SlotService

router = APIRouter(prefix="/slots")


@router.get(
    "/simple",
    response_model=SimpleSlotsResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Bookable slots for a date",
)
async def simple_slots(
    db: DatabaseSession,
    day: str | None = Query(None, alias="date"),
) -> SimpleSlotsResponse:
    """
    Booked and available slots for one date.

    ``allBlocked`` and ``blockReason`` are only present when the whole day
    is blocked.

    Args:
        db: Database session
        day: Calendar date (YYYY-MM-DD)

    Returns:
        Slot lists for the day
    """
    if not day:
        raise BadRequestException("Date required")

    try:
        parsed = parse_iso_date(day)
    except ValueError as e:
        raise BadRequestException(str(e)) from None

    availability = await SlotService(db).resolve(parsed)

    if availability.all_blocked:
        return SimpleSlotsResponse(
            booked_slots=availability.booked_slots,
            available_slots=availability.available_slots,
            all_blocked=True,
            block_reason=availability.block_reason,
        )

    return SimpleSlotsResponse(
        booked_slots=availability.booked_slots,
        available_slots=availability.available_slots,
    )


@router.get(
    "/availability",
    response_model=SlotCheck | DaySlotsSummary,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Per-slot availability",
)
async def slot_availability(
    db: DatabaseSession,
    day: str | None = Query(None, alias="date"),
    time: str | None = Query(None),
) -> SlotCheck | DaySlotsSummary:
    """
    Availability of one slot (with ``time``) or of every slot of a day.

    Past dates are rejected; Sundays report every slot closed.
    """
    if not day:
        raise BadRequestException("Date required")

    try:
        parsed = parse_iso_date(day)
    except ValueError as e:
        raise BadRequestException(str(e)) from None

    service = SlotService(db)
    if time:
        return await service.check_slot(parsed, time)
    return await service.day_summary(parsed)
