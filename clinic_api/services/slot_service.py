"""Slot availability: which consultation slots of a day can still be booked."""

from datetime import date

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.calendar import TIME_SLOTS, clinic_today, is_sunday
from clinic_api.core.exceptions import BadRequestException
from clinic_api.models.appointments import appointments
from clinic_api.schemas.appointments import AppointmentStatus
from clinic_api.schemas.slots import DaySlotsSummary, SlotAvailability, SlotCheck
from clinic_api.services.blocked_date_service import BlockedDateService

SUNDAY_CLOSED_REASON = "Hospital closed on Sundays"


class SlotService:
    """Resolve slot availability from blocks and live bookings."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def booked_times(self, day: date) -> set[str]:
        """Slot labels held by live (not cancelled, not deleted) appointments."""
        stmt = select(appointments.c.time).where(
            and_(
                appointments.c.date == day,
                appointments.c.status != AppointmentStatus.CANCELLED.value,
                appointments.c.deleted_at.is_(None),
            )
        )
        result = await self.db.execute(stmt)
        return set(result.scalars().all())

    async def resolve(self, day: date) -> SlotAvailability:
        """
        Availability of every slot on ``day``.

        A whole-day block closes the day outright. Otherwise blocked slots and
        slots taken by live bookings are removed from the fixed list, which
        keeps its calendar order.

        Args:
            day: Calendar date

        Returns:
            Slot availability for the day
        """
        block = await BlockedDateService(self.db).get_active_block(day)

        if block and not block.time_slots:
            return SlotAvailability(
                date=day,
                all_blocked=True,
                block_reason=block.reason,
                booked_slots=[],
                available_slots=[],
            )

        unavailable = await self.booked_times(day)
        if block:
            unavailable.update(block.time_slots)

        return SlotAvailability(
            date=day,
            all_blocked=False,
            block_reason=block.reason if block else None,
            booked_slots=[slot for slot in TIME_SLOTS if slot in unavailable],
            available_slots=[slot for slot in TIME_SLOTS if slot not in unavailable],
        )

    async def _slot_checks(self, day: date) -> list[SlotCheck]:
        if day < clinic_today():
            raise BadRequestException("Cannot check availability for past dates")

        if is_sunday(day):
            return [
                SlotCheck(
                    date=day,
                    time=time,
                    is_available=False,
                    is_blocked=True,
                    block_reason=SUNDAY_CLOSED_REASON,
                )
                for time in TIME_SLOTS
            ]

        block = await BlockedDateService(self.db).get_active_block(day)
        if block and not block.time_slots:
            return [
                SlotCheck(
                    date=day,
                    time=time,
                    is_available=False,
                    is_blocked=True,
                    block_reason=block.reason,
                )
                for time in TIME_SLOTS
            ]

        blocked = set(block.time_slots) if block else set()
        block_reason = block.reason if block else None
        booked = await self.booked_times(day)

        checks = []
        for time in TIME_SLOTS:
            if time in blocked:
                checks.append(
                    SlotCheck(
                        date=day,
                        time=time,
                        is_available=False,
                        is_blocked=True,
                        block_reason=block_reason,
                    )
                )
            elif time in booked:
                checks.append(SlotCheck(date=day, time=time, is_available=False))
            else:
                checks.append(SlotCheck(date=day, time=time, is_available=True))
        return checks

    async def check_slot(self, day: date, time: str) -> SlotCheck:
        """
        Availability of one slot.

        Raises:
            BadRequestException: If the date is past or the slot label unknown
        """
        if time not in TIME_SLOTS:
            raise BadRequestException(f"Invalid time slot: {time}")

        checks = await self._slot_checks(day)
        return next(check for check in checks if check.time == time)

    async def day_summary(self, day: date) -> DaySlotsSummary:
        """
        Per-slot availability of a whole day.

        Raises:
            BadRequestException: If the date is past
        """
        checks = await self._slot_checks(day)
        available_count = sum(1 for check in checks if check.is_available)
        return DaySlotsSummary(
            date=day,
            total_slots=len(checks),
            available_count=available_count,
            unavailable_count=len(checks) - available_count,
            slots=checks,
        )
