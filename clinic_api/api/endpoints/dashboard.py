"""Dashboard endpoints."""

from datetime import date

from fastapi import APIRouter, status
from sqlalchemy import and_, func, select

from clinic_api.core.calendar import clinic_midnight, clinic_today, week_start
from clinic_api.dependencies import CurrentAdmin, DatabaseSession
from clinic_api.models.appointments import appointments
from clinic_api.schemas.appointments import AppointmentResponse
from clinic_api.schemas.dashboard import DashboardStats, DashboardStatsResponse
from clinic_api.services.blocked_date_service import BlockedDateService

router = APIRouter(prefix="/dashboard")

RECENT_APPOINTMENTS_LIMIT = 10


@router.get(
    "/stats",
    response_model=DashboardStatsResponse,
    status_code=status.HTTP_200_OK,
    summary="Get dashboard statistics",
)
async def get_dashboard_stats(
    admin: CurrentAdmin,
    db: DatabaseSession,
) -> DashboardStatsResponse:
    """
    Booking counters and the latest appointments.

    Periods are clinic-local calendar periods measured on ``createdAt``;
    weeks start on Sunday.

    Args:
        admin: Signed-in admin
        db: Database session

    Returns:
        Dashboard statistics and recent appointments
    """
    today = clinic_today()
    live = appointments.c.deleted_at.is_(None)

    async def created_since(day: date) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(appointments)
            .where(and_(live, appointments.c.created_at >= clinic_midnight(day)))
        )
        return result.scalar_one()

    total_result = await db.execute(select(func.count()).select_from(appointments).where(live))

    recent_result = await db.execute(
        select(appointments)
        .where(live)
        .order_by(appointments.c.created_at.desc())
        .limit(RECENT_APPOINTMENTS_LIMIT)
    )
    recent = [AppointmentResponse.model_validate(dict(row._mapping)) for row in recent_result]

    stats = DashboardStats(
        total_appointments=total_result.scalar_one(),
        today_appointments=await created_since(today),
        this_week_appointments=await created_since(week_start(today)),
        this_month_appointments=await created_since(today.replace(day=1)),
        upcoming_blocked_dates=await BlockedDateService(db).count_upcoming(today),
    )

    return DashboardStatsResponse(stats=stats, recent_appointments=recent)
