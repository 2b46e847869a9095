"""Blocked date endpoints for the admin dashboard and the booking calendar."""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Query, status

from clinic_api.core.exceptions import BadRequestException
from clinic_api.dependencies import CacheManagerDep, CurrentAdmin, DatabaseSession
from clinic_api.schemas.blocked_dates import (
    BlockedDateCreate,
    BlockedDateFilters,
    BlockedDateRangeResponse,
    BlockedDateResponse,
    BlockedDateUpdate,
    DateRange,
)
from clinic_api.schemas.common import ApiResponse, parse_iso_date
from clinic_api.services.blocked_date_service import BlockedDateService

router = APIRouter(prefix="/admin/blocked-dates")


def _date_param(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise BadRequestException(str(e)) from None


def _blocked_date_id(value: str | None) -> UUID:
    if not value:
        raise BadRequestException("Blocked date ID is required")
    try:
        return UUID(value)
    except ValueError:
        raise BadRequestException("Invalid blocked date ID") from None


@router.get(
    "",
    response_model=ApiResponse[list[BlockedDateResponse]],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="List blocked dates",
)
async def list_blocked_dates(
    admin: CurrentAdmin,
    db: DatabaseSession,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    is_active: bool | None = Query(None, alias="isActive"),
) -> ApiResponse[list[BlockedDateResponse]]:
    """
    List blocked dates in ascending date order.

    Args:
        admin: Signed-in admin
        db: Database session
        start_date: Inclusive lower bound (YYYY-MM-DD)
        end_date: Inclusive upper bound (YYYY-MM-DD)
        is_active: Only active or only inactive blocks

    Returns:
        Blocked dates and their count
    """
    filters = BlockedDateFilters(
        start_date=_date_param(start_date),
        end_date=_date_param(end_date),
        is_active=is_active,
    )
    items = await BlockedDateService(db).list_blocked_dates(filters)
    return ApiResponse(data=items, count=len(items))


@router.post(
    "",
    response_model=ApiResponse[BlockedDateResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Block a date",
)
async def create_blocked_date(
    data: BlockedDateCreate,
    admin: CurrentAdmin,
    db: DatabaseSession,
    cache: CacheManagerDep,
) -> ApiResponse[BlockedDateResponse]:
    """
    Block a whole day or some of its slots and post the matching ticker notice.

    Args:
        data: Date, optional time slots and reason
        admin: Signed-in admin
        db: Database session
        cache: Ticker cache

    Returns:
        Created blocked date
    """
    blocked_date = await BlockedDateService(db, cache).create_blocked_date(data, admin)
    return ApiResponse(message="Date blocked successfully", data=blocked_date)


@router.patch(
    "",
    response_model=ApiResponse[BlockedDateResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Update a blocked date",
)
async def update_blocked_date(
    data: BlockedDateUpdate,
    admin: CurrentAdmin,
    db: DatabaseSession,
    cache: CacheManagerDep,
    blocked_date_id: str | None = Query(None, alias="id"),
) -> ApiResponse[BlockedDateResponse]:
    """Change reason, time slots or active flag; the ticker notice follows."""
    updated = await BlockedDateService(db, cache).update_blocked_date(
        _blocked_date_id(blocked_date_id), data
    )
    return ApiResponse(message="Blocked date updated successfully", data=updated)


@router.delete(
    "",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Delete a blocked date",
)
async def delete_blocked_date(
    admin: CurrentAdmin,
    db: DatabaseSession,
    cache: CacheManagerDep,
    blocked_date_id: str | None = Query(None, alias="id"),
) -> ApiResponse[None]:
    """Delete a blocked date and its ticker notice."""
    await BlockedDateService(db, cache).delete_blocked_date(_blocked_date_id(blocked_date_id))
    return ApiResponse(message="Blocked date deleted successfully")


@router.get(
    "/range",
    response_model=BlockedDateRangeResponse,
    status_code=status.HTTP_200_OK,
    summary="Active blocks in a date range",
)
async def list_blocked_range(
    db: DatabaseSession,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
) -> BlockedDateRangeResponse:
    """
    Active blocks between two dates, keyed by date, for the booking calendar.

    Public: the calendar greys out blocked days before a visitor picks one.
    """
    if not start_date or not end_date:
        raise BadRequestException("startDate and endDate are required")

    start, end = _date_param(start_date), _date_param(end_date)
    data = await BlockedDateService(db).list_range(start, end)
    return BlockedDateRangeResponse(
        data=data,
        count=len(data),
        range=DateRange(start_date=start, end_date=end),
    )
