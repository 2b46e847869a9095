"""Ticker service: public notices derived from blocked dates plus emergency notices."""

from collections.abc import Sequence
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from sqlalchemy import and_, delete, insert, select, true
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_api.config import settings
from clinic_api.core.calendar import as_utc, notice_window, utc_now
from clinic_api.core.redis_client import CacheManager
from clinic_api.models.blocked_dates import blocked_dates
from clinic_api.models.ticker_notifications import ticker_notifications
from clinic_api.schemas.ticker import (
    BLOCKED_DATE_PRIORITY,
    EmergencyNoticeCreate,
    TickerNotificationResponse,
    TickerNotificationType,
)

logger = structlog.get_logger(__name__)

ACTIVE_NOTICES_CACHE_KEY = "ticker:active"


def build_notice_message(reason: str, day: date, time_slots: Sequence[str] | None) -> str:
    """Compose the visitor-facing text for a blocked day."""
    message = f"Notice: {reason} on {day.isoformat()}"
    if time_slots:
        message += f" ({', '.join(time_slots)})"
    return message


def blocked_date_notice_values(
    blocked_date_id: UUID,
    reason: str,
    day: date,
    time_slots: Sequence[str] | None,
    now: datetime,
) -> dict[str, Any]:
    """Row values of the notice announcing a new block."""
    return {
        "id": blocked_date_id,
        "message": build_notice_message(reason, day, time_slots),
        "type": TickerNotificationType.BLOCKED_DATE.value,
        "start_date": None,
        "end_date": None,
        "is_active": True,
        "priority": BLOCKED_DATE_PRIORITY,
        "related_blocked_date_id": blocked_date_id,
        "created_at": now,
        "updated_at": now,
    }


def _in_window(
    notices: list[TickerNotificationResponse],
    now: datetime,
) -> list[TickerNotificationResponse]:
    return [notice for notice in notices if notice.start_date <= now <= notice.end_date]


class TickerService:
    """Service for reading and maintaining ticker notices."""

    def __init__(self, db: AsyncSession, cache: CacheManager | None = None):
        """Initialize service with database session and optional cache."""
        self.db = db
        self.cache = cache

    def invalidate_cache(self) -> None:
        """Drop the cached list of active notices."""
        if self.cache is not None:
            self.cache.delete(ACTIVE_NOTICES_CACHE_KEY)

    async def list_active(self, now: datetime | None = None) -> list[TickerNotificationResponse]:
        """
        Notices that should be on screen right now.

        A notice is shown when it is active, its owning block (if any) is
        active, and ``now`` falls inside its display window. Blocked-date
        windows are derived from the block's date. Highest priority first,
        then newest first.

        Args:
            now: Reference time; defaults to the current time and enables caching

        Returns:
            Active notices
        """
        use_cache = now is None and self.cache is not None
        now = as_utc(now or utc_now())

        if use_cache:
            cached = self.cache.get_json(ACTIVE_NOTICES_CACHE_KEY)  # type: ignore[union-attr]
            if cached is not None:
                cached_notices = [TickerNotificationResponse.model_validate(item) for item in cached]
                return _in_window(cached_notices, now)

        stmt = (
            select(
                ticker_notifications,
                blocked_dates.c.date.label("blocked_day"),
                blocked_dates.c.is_active.label("block_is_active"),
            )
            .select_from(
                ticker_notifications.outerjoin(
                    blocked_dates,
                    ticker_notifications.c.related_blocked_date_id == blocked_dates.c.id,
                )
            )
            .where(ticker_notifications.c.is_active == true())
            .order_by(
                ticker_notifications.c.priority.desc(),
                ticker_notifications.c.created_at.desc(),
            )
        )
        result = await self.db.execute(stmt)

        # Everything not yet over; the cached list is narrowed to ``now`` on each read
        upcoming: list[TickerNotificationResponse] = []
        for row in result.mappings().all():
            if row["related_blocked_date_id"] is not None:
                if row["blocked_day"] is None or not row["block_is_active"]:
                    continue
                start, end = notice_window(row["blocked_day"])
            else:
                if row["start_date"] is None or row["end_date"] is None:
                    continue
                start, end = as_utc(row["start_date"]), as_utc(row["end_date"])

            if now <= end:
                upcoming.append(
                    TickerNotificationResponse(
                        id=row["id"],
                        message=row["message"],
                        type=row["type"],
                        start_date=start,
                        end_date=end,
                        is_active=row["is_active"],
                        priority=row["priority"],
                        related_blocked_date_id=row["related_blocked_date_id"],
                    )
                )

        if use_cache:
            self.cache.set_json(  # type: ignore[union-attr]
                ACTIVE_NOTICES_CACHE_KEY,
                [notice.model_dump(mode="json", by_alias=True) for notice in upcoming],
                ttl=settings.ticker_cache_ttl,
            )

        return _in_window(upcoming, now)

    async def create_emergency_notice(
        self,
        data: EmergencyNoticeCreate,
    ) -> TickerNotificationResponse:
        """
        Post an emergency notice with its own display window.

        Args:
            data: Notice text, window and priority

        Returns:
            Created notice
        """
        now = utc_now()
        values = {
            "id": uuid4(),
            "message": data.message,
            "type": TickerNotificationType.EMERGENCY.value,
            "start_date": data.start_date,
            "end_date": data.end_date,
            "is_active": True,
            "priority": data.priority,
            "related_blocked_date_id": None,
            "created_at": now,
            "updated_at": now,
        }
        await self.db.execute(insert(ticker_notifications).values(**values))
        await self.db.commit()
        self.invalidate_cache()

        logger.info(
            "emergency_notice_created",
            notice_id=str(values["id"]),
            priority=data.priority,
        )

        return TickerNotificationResponse(
            id=values["id"],
            message=data.message,
            type=TickerNotificationType.EMERGENCY,
            start_date=data.start_date,
            end_date=data.end_date,
            is_active=True,
            priority=data.priority,
        )

    async def purge_expired(self, now: datetime | None = None) -> int:
        """
        Delete emergency notices whose window has ended.

        Blocked-date notices live and die with their block.

        Returns:
            Number of notices deleted
        """
        now = as_utc(now or utc_now())
        stmt = delete(ticker_notifications).where(
            and_(
                ticker_notifications.c.type == TickerNotificationType.EMERGENCY.value,
                ticker_notifications.c.end_date < now,
            )
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        self.invalidate_cache()

        deleted = result.rowcount or 0
        logger.info("expired_notices_purged", deleted_count=deleted)
        return deleted
