"""API router configuration."""

from fastapi import APIRouter

from clinic_api.api.endpoints import (
    appointments,
    auth,
    blocked_dates,
    dashboard,
    health,
    slots,
    ticker,
)

api_router = APIRouter()

# Include routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(blocked_dates.router, tags=["Blocked Dates"])
api_router.include_router(ticker.router, tags=["Ticker"])
api_router.include_router(slots.router, tags=["Slots"])
api_router.include_router(appointments.router, tags=["Appointments"])
api_router.include_router(dashboard.router, tags=["Dashboard"])
