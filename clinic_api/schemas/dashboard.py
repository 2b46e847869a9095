"""Dashboard schemas."""

from clinic_api.schemas.appointments import AppointmentResponse
from clinic_api.schemas.common import CamelModel


class DashboardStats(CamelModel):
    """Appointment counters shown on the dashboard."""

    total_appointments: int
    today_appointments: int
    this_week_appointments: int
    this_month_appointments: int
    upcoming_blocked_dates: int


class DashboardStatsResponse(CamelModel):
    """Response schema for dashboard statistics."""

    success: bool = True
    stats: DashboardStats
    recent_appointments: list[AppointmentResponse]
