"""Blocked date service: admin-managed closures and their ticker notices."""

from datetime import date
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, delete, insert, select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.core.calendar import clinic_today, utc_now
from clinic_api.core.exceptions import BadRequestException, ConflictException, NotFoundException
from clinic_api.core.redis_client import CacheManager
from clinic_api.models.blocked_dates import blocked_dates
from clinic_api.models.ticker_notifications import ticker_notifications
from clinic_api.schemas.auth import AdminSession
from clinic_api.schemas.blocked_dates import (
    BlockedDateCreate,
    BlockedDateFilters,
    BlockedDateResponse,
    BlockedDateUpdate,
    BlockedDayInfo,
)
from clinic_api.services.ticker_service import (
    TickerService,
    blocked_date_notice_values,
    build_notice_message,
)

logger = structlog.get_logger(__name__)


class BlockedDateService:
    """Service for managing blocked dates."""

    def __init__(self, db: AsyncSession, cache: CacheManager | None = None):
        """Initialize service with database session and optional cache."""
        self.db = db
        self.ticker = TickerService(db, cache)

    async def _get_row(self, blocked_date_id: UUID) -> Any:
        stmt = select(blocked_dates).where(blocked_dates.c.id == blocked_date_id)
        result = await self.db.execute(stmt)
        row = result.fetchone()

        if not row:
            raise NotFoundException("Blocked date not found")

        return row

    async def list_blocked_dates(
        self,
        filters: BlockedDateFilters,
    ) -> list[BlockedDateResponse]:
        """
        List blocked dates in ascending date order.

        Args:
            filters: Optional inclusive date bounds and active flag

        Returns:
            Matching blocked dates
        """
        conditions = []

        if filters.start_date:
            conditions.append(blocked_dates.c.date >= filters.start_date)

        if filters.end_date:
            conditions.append(blocked_dates.c.date <= filters.end_date)

        if filters.is_active is not None:
            conditions.append(blocked_dates.c.is_active == filters.is_active)

        stmt = select(blocked_dates).order_by(
            blocked_dates.c.date.asc(),
            blocked_dates.c.created_at.asc(),
        )
        if conditions:
            stmt = stmt.where(and_(*conditions))

        result = await self.db.execute(stmt)
        return [BlockedDateResponse.model_validate(dict(row._mapping)) for row in result.fetchall()]

    async def create_blocked_date(
        self,
        data: BlockedDateCreate,
        admin: AdminSession,
    ) -> BlockedDateResponse:
        """
        Block a date (or some of its slots) and announce it on the ticker.

        The block and its notice are written in one transaction.

        Args:
            data: Date, optional time slots and reason
            admin: Administrator creating the block

        Returns:
            Created blocked date

        Raises:
            BadRequestException: If the date is in the past
            ConflictException: If the date already has an active block
        """
        if data.date < clinic_today():
            raise BadRequestException("Cannot block dates in the past")

        now = utc_now()
        time_slots = data.time_slots or []
        values = {
            "id": uuid4(),
            "date": data.date,
            "time_slots": time_slots,
            "reason": data.reason,
            "blocked_by": admin.id,
            "blocked_by_name": admin.name,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }

        try:
            await self.db.execute(insert(blocked_dates).values(**values))
            await self.db.execute(
                insert(ticker_notifications).values(
                    **blocked_date_notice_values(
                        values["id"], data.reason, data.date, time_slots, now
                    )
                )
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("blocked_date_conflict", date=data.date.isoformat())
            raise ConflictException("Date is already blocked") from None

        self.ticker.invalidate_cache()

        logger.info(
            "blocked_date_created",
            blocked_date_id=str(values["id"]),
            date=data.date.isoformat(),
            time_slots=time_slots,
            blocked_by=admin.email,
        )

        return BlockedDateResponse.model_validate(values)

    async def update_blocked_date(
        self,
        blocked_date_id: UUID,
        data: BlockedDateUpdate,
    ) -> BlockedDateResponse:
        """
        Partially update a blocked date and keep its notice in step.

        A new reason or new time slots rewrite the notice text. A new reason
        also re-enables the notice unless the same request deactivates the
        block. A bare ``is_active`` change is mirrored on the notice.

        Args:
            blocked_date_id: Blocked date ID
            data: Fields to change

        Returns:
            Updated blocked date

        Raises:
            NotFoundException: If blocked date not found
            ConflictException: If reactivation collides with another active block
        """
        current = await self._get_row(blocked_date_id)

        update_values: dict[str, Any] = {}
        if data.reason is not None:
            update_values["reason"] = data.reason
        if data.is_active is not None:
            update_values["is_active"] = data.is_active
        if data.time_slots is not None:
            update_values["time_slots"] = data.time_slots

        if not update_values:
            return BlockedDateResponse.model_validate(dict(current._mapping))

        now = utc_now()
        update_values["updated_at"] = now

        notice_values: dict[str, Any] = {}
        if data.reason is not None or data.time_slots is not None:
            reason = data.reason if data.reason is not None else current.reason
            slots = data.time_slots if data.time_slots is not None else current.time_slots
            notice_values["message"] = build_notice_message(reason, current.date, slots)
        if data.reason is not None:
            notice_values["is_active"] = data.is_active is not False
        elif data.is_active is not None:
            notice_values["is_active"] = data.is_active

        try:
            result = await self.db.execute(
                update(blocked_dates)
                .where(blocked_dates.c.id == blocked_date_id)
                .values(**update_values)
                .returning(blocked_dates)
            )
            row = result.fetchone()
            if notice_values:
                notice_values["updated_at"] = now
                await self.db.execute(
                    update(ticker_notifications)
                    .where(ticker_notifications.c.related_blocked_date_id == blocked_date_id)
                    .values(**notice_values)
                )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("blocked_date_conflict", blocked_date_id=str(blocked_date_id))
            raise ConflictException("Date is already blocked") from None

        self.ticker.invalidate_cache()

        logger.info(
            "blocked_date_updated",
            blocked_date_id=str(blocked_date_id),
            fields=sorted(k for k in update_values if k != "updated_at"),
        )

        return BlockedDateResponse.model_validate(dict(row._mapping))

    async def delete_blocked_date(self, blocked_date_id: UUID) -> None:
        """
        Delete a blocked date together with its notice.

        Raises:
            NotFoundException: If blocked date not found
        """
        await self._get_row(blocked_date_id)

        await self.db.execute(
            delete(ticker_notifications).where(
                ticker_notifications.c.related_blocked_date_id == blocked_date_id
            )
        )
        await self.db.execute(delete(blocked_dates).where(blocked_dates.c.id == blocked_date_id))
        await self.db.commit()

        self.ticker.invalidate_cache()

        logger.info("blocked_date_deleted", blocked_date_id=str(blocked_date_id))

    async def get_active_block(self, day: date) -> BlockedDateResponse | None:
        """Active block on ``day``, if any."""
        stmt = select(blocked_dates).where(
            and_(
                blocked_dates.c.date == day,
                blocked_dates.c.is_active == true(),
            )
        )
        result = await self.db.execute(stmt)
        row = result.first()
        return BlockedDateResponse.model_validate(dict(row._mapping)) if row else None

    async def list_range(self, start_date: date, end_date: date) -> dict[str, BlockedDayInfo]:
        """
        Active blocks between two dates (inclusive), keyed by ISO date.

        Raises:
            BadRequestException: If start is after end
        """
        if start_date > end_date:
            raise BadRequestException("Start date must be before or equal to end date")

        blocks = await self.list_blocked_dates(
            BlockedDateFilters(start_date=start_date, end_date=end_date, is_active=True)
        )
        return {
            block.date.isoformat(): BlockedDayInfo(
                reason=block.reason,
                time_slots=block.time_slots,
                is_full_day_blocked=not block.time_slots,
            )
            for block in blocks
        }

    async def count_upcoming(self, today: date | None = None) -> int:
        """Number of active blocks from ``today`` on."""
        today = today or clinic_today()
        blocks = await self.list_blocked_dates(
            BlockedDateFilters(start_date=today, is_active=True)
        )
        return len(blocks)
