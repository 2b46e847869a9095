"""Ticker notification endpoints."""

from fastapi import APIRouter, status

from clinic_api.dependencies import CacheManagerDep, CurrentAdmin, DatabaseSession
from clinic_api.schemas.common import ApiResponse
from clinic_api.schemas.ticker import (
    EmergencyNoticeCreate,
    TickerCleanupResponse,
    TickerNotificationResponse,
)
from clinic_api.services.ticker_service import TickerService

router = APIRouter(prefix="/ticker/notifications")


@router.get(
    "",
    response_model=ApiResponse[list[TickerNotificationResponse]],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Notices to show in the site ticker",
)
async def list_active_notices(
    db: DatabaseSession,
    cache: CacheManagerDep,
) -> ApiResponse[list[TickerNotificationResponse]]:
    """
    Active notices whose display window contains the current time.

    Public; ordered by priority (highest first), then newest first.

    Args:
        db: Database session
        cache: Short-lived cache of the active list

    Returns:
        Notices and their count
    """
    notices = await TickerService(db, cache).list_active()
    return ApiResponse(data=notices, count=len(notices))


@router.post(
    "",
    response_model=ApiResponse[TickerNotificationResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Post an emergency notice",
)
async def create_emergency_notice(
    data: EmergencyNoticeCreate,
    admin: CurrentAdmin,
    db: DatabaseSession,
    cache: CacheManagerDep,
) -> ApiResponse[TickerNotificationResponse]:
    """Post an emergency notice shown between its start and end dates."""
    notice = await TickerService(db, cache).create_emergency_notice(data)
    return ApiResponse(message="Notice created successfully", data=notice)


@router.delete(
    "",
    response_model=TickerCleanupResponse,
    status_code=status.HTTP_200_OK,
    summary="Purge expired emergency notices",
)
async def purge_expired_notices(
    admin: CurrentAdmin,
    db: DatabaseSession,
    cache: CacheManagerDep,
) -> TickerCleanupResponse:
    """Delete emergency notices whose window has ended."""
    deleted = await TickerService(db, cache).purge_expired()
    return TickerCleanupResponse(
        message=f"Removed {deleted} expired notices",
        deleted_count=deleted,
    )
