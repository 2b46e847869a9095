"""Appointment endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from clinic_api.core.exceptions import BadRequestException
from clinic_api.dependencies import CurrentAdmin, DatabaseSession, client_ip, limit_booking_rate
from clinic_api.schemas.appointments import (
    AppointmentCreate,
    AppointmentFilters,
    AppointmentListResponse,
    AppointmentResponse,
    AppointmentStatus,
    AppointmentStatusUpdate,
)
from clinic_api.schemas.common import ApiResponse, parse_iso_date
from clinic_api.services.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments")


@router.post(
    "",
    response_model=ApiResponse[AppointmentResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(limit_booking_rate)],
    summary="Book an appointment",
)
async def create_appointment(
    data: AppointmentCreate,
    request: Request,
    db: DatabaseSession,
) -> ApiResponse[AppointmentResponse]:
    """
    Book an appointment from the public website form.

    Protected by reCAPTCHA v3 and a per-IP rate limit.

    Args:
        data: Booking form data
        request: Incoming request (client address)
        db: Database session

    Returns:
        Created appointment
    """
    service = AppointmentService(db)
    appointment = await service.create_appointment(data, client_ip=client_ip(request))
    return ApiResponse(
        message="Appointment booked successfully. We will contact you to confirm.",
        data=appointment,
    )


@router.get(
    "",
    response_model=AppointmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List appointments",
)
async def list_appointments(
    admin: CurrentAdmin,
    db: DatabaseSession,
    status_filter: AppointmentStatus | None = Query(None, alias="status"),
    day: str | None = Query(None, alias="date"),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200, alias="pageSize"),
) -> AppointmentListResponse:
    """
    List appointments newest first, for the dashboard.

    Args:
        admin: Signed-in admin
        db: Database session
        status_filter: Filter by status
        day: Filter by appointment date (YYYY-MM-DD)
        page: Page number
        page_size: Items per page

    Returns:
        Paginated list of appointments
    """
    try:
        appointment_date = parse_iso_date(day) if day else None
    except ValueError as e:
        raise BadRequestException(str(e)) from None

    filters = AppointmentFilters(
        status=status_filter,
        appointment_date=appointment_date,
        page=page,
        page_size=page_size,
    )

    service = AppointmentService(db)
    return await service.list_appointments(filters)


@router.patch(
    "/{appointment_id}/status",
    response_model=ApiResponse[AppointmentResponse],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Update appointment status",
)
async def update_appointment_status(
    appointment_id: UUID,
    data: AppointmentStatusUpdate,
    admin: CurrentAdmin,
    db: DatabaseSession,
) -> ApiResponse[AppointmentResponse]:
    """Move an appointment to a new status."""
    service = AppointmentService(db)
    appointment = await service.update_appointment_status(appointment_id, data)
    return ApiResponse(message="Appointment updated successfully", data=appointment)


@router.delete(
    "/{appointment_id}",
    response_model=ApiResponse[None],
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Delete appointment",
)
async def delete_appointment(
    appointment_id: UUID,
    admin: CurrentAdmin,
    db: DatabaseSession,
) -> ApiResponse[None]:
    """Remove an appointment from the dashboard (soft delete)."""
    service = AppointmentService(db)
    await service.delete_appointment(appointment_id)
    return ApiResponse(message="Appointment deleted successfully")
