"""Appointment service for business logic."""

from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.calendar import TIME_SLOTS, clinic_today, is_sunday, utc_now
from clinic_api.core.captcha import verify_recaptcha
from clinic_api.core.exceptions import BadRequestException, ConflictException, NotFoundException
from clinic_api.models.appointments import appointments
from clinic_api.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
)
from clinic_api.services.slot_service import SlotService

logger = structlog.get_logger(__name__)

SLOT_TAKEN_MESSAGE = "Selected time slot is not available"


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def create_appointment(
        self,
        data: AppointmentCreate,
        client_ip: str | None = None,
    ) -> AppointmentResponse:
        """
        Book an appointment from the public form.

        Args:
            data: Booking form data
            client_ip: Caller address, forwarded to reCAPTCHA

        Returns:
            Created appointment (status ``pending``)

        Raises:
            BadRequestException: Failed captcha, past date, Sunday or unknown slot
            ConflictException: If the slot is blocked or already booked
        """
        captcha = await verify_recaptcha(data.captcha_token, remote_ip=client_ip)
        if not captcha.success:
            raise BadRequestException("reCAPTCHA verification failed. Please try again.")

        if data.date < clinic_today():
            raise BadRequestException("Cannot book appointments for past dates")

        if is_sunday(data.date):
            raise BadRequestException("Hospital closed on Sundays")

        if data.time not in TIME_SLOTS:
            raise BadRequestException(f"Invalid time slot: {data.time}")

        availability = await SlotService(self.db).resolve(data.date)
        if data.time not in availability.available_slots:
            raise ConflictException(SLOT_TAKEN_MESSAGE)

        now = utc_now()
        values = {
            "id": uuid4(),
            "name": data.name,
            "email": str(data.email),
            "phone": data.phone,
            "service": data.service,
            "date": data.date,
            "time": data.time,
            "message": data.message,
            "status": AppointmentStatus.PENDING.value,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = await self.db.execute(
                insert(appointments).values(**values).returning(appointments)
            )
            row = result.fetchone()
            await self.db.commit()
        except IntegrityError:
            # Another booking took the slot between the check and the insert
            await self.db.rollback()
            raise ConflictException(SLOT_TAKEN_MESSAGE) from None

        logger.info(
            "appointment_created",
            appointment_id=str(values["id"]),
            date=data.date.isoformat(),
            time=data.time,
            captcha_score=captcha.score,
        )

        return AppointmentResponse.model_validate(dict(row._mapping))

    async def get_appointment(self, appointment_id: UUID) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
        """
        stmt = select(appointments).where(
            and_(
                appointments.c.id == appointment_id,
                appointments.c.deleted_at.is_(None),
            )
        )

        result = await self.db.execute(stmt)
        row = result.fetchone()

        if not row:
            raise NotFoundException("Appointment not found")

        return AppointmentResponse.model_validate(dict(row._mapping))

    async def list_appointments(self, filters: AppointmentFilters) -> AppointmentListResponse:
        """
        List appointments with filtering and pagination, newest first.

        Args:
            filters: Filter and pagination parameters

        Returns:
            Paginated list of appointments
        """
        conditions: list[Any] = [appointments.c.deleted_at.is_(None)]

        if filters.status:
            conditions.append(appointments.c.status == filters.status.value)

        if filters.appointment_date:
            conditions.append(appointments.c.date == filters.appointment_date)

        # Count total
        count_stmt = select(func.count()).select_from(appointments).where(and_(*conditions))
        total_result = await self.db.execute(count_stmt)
        total = total_result.scalar() or 0

        # Get paginated results
        offset = (filters.page - 1) * filters.page_size

        stmt = (
            select(appointments)
            .where(and_(*conditions))
            .order_by(appointments.c.created_at.desc())
            .limit(filters.page_size)
            .offset(offset)
        )

        result = await self.db.execute(stmt)
        items = [AppointmentResponse.model_validate(dict(row._mapping)) for row in result.fetchall()]

        return AppointmentListResponse(
            data=items,
            count=len(items),
            total=total,
            page=filters.page,
            page_size=filters.page_size,
        )

    async def update_appointment_status(
        self,
        appointment_id: UUID,
        data: AppointmentStatusUpdate,
    ) -> AppointmentResponse:
        """
        Update appointment status.

        Raises:
            NotFoundException: If appointment not found
            BadRequestException: If the status is unchanged
            ConflictException: If un-cancelling onto a slot booked meanwhile
        """
        current = await self.get_appointment(appointment_id)
        if current.status == data.status:
            raise BadRequestException("No changes made to appointment")

        try:
            result = await self.db.execute(
                update(appointments)
                .where(appointments.c.id == appointment_id)
                .values(status=data.status.value, updated_at=utc_now())
                .returning(appointments)
            )
            row = result.fetchone()
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException(SLOT_TAKEN_MESSAGE) from None

        logger.info(
            "appointment_status_updated",
            appointment_id=str(appointment_id),
            old_status=current.status.value,
            new_status=data.status.value,
        )

        return AppointmentResponse.model_validate(dict(row._mapping))

    async def delete_appointment(self, appointment_id: UUID) -> None:
        """
        Soft delete an appointment; its slot becomes bookable again.

        Raises:
            NotFoundException: If appointment not found
        """
        await self.get_appointment(appointment_id)

        now = utc_now()
        await self.db.execute(
            update(appointments)
            .where(appointments.c.id == appointment_id)
            .values(deleted_at=now, updated_at=now)
        )
        await self.db.commit()

        logger.info("appointment_deleted", appointment_id=str(appointment_id))
