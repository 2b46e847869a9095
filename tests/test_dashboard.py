"""Tests for dashboard statistics."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from tests.helpers import open_day


@pytest.mark.asyncio
async def test_dashboard_stats(
    client: AsyncClient,
    captcha: AsyncMock,
    admin_headers: dict,
    booking_data: dict,
) -> None:
    for time in ("10:30 AM", "11:00 AM", "11:30 AM"):
        await client.post("/api/appointments", json={**booking_data, "time": time})
    await client.post(
        "/api/admin/blocked-dates",
        json={"date": open_day(12).isoformat(), "reason": "Conference"},
        headers=admin_headers,
    )

    response = await client.get("/api/dashboard/stats", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    stats = body["stats"]
    assert stats["totalAppointments"] == 3
    assert stats["todayAppointments"] == 3
    assert stats["thisWeekAppointments"] == 3
    assert stats["thisMonthAppointments"] == 3
    assert stats["upcomingBlockedDates"] == 1
    assert len(body["recentAppointments"]) == 3
    assert body["recentAppointments"][0]["time"] == "11:30 AM"


@pytest.mark.asyncio
async def test_dashboard_requires_admin(client: AsyncClient) -> None:
    response = await client.get("/api/dashboard/stats")
    assert response.status_code == 401
