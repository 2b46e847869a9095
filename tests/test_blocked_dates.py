"""Tests for the blocked date admin API."""

from datetime import timedelta
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from clinic_api.core.calendar import clinic_today
from clinic_api.models.blocked_dates import blocked_dates
from clinic_api.models.ticker_notifications import ticker_notifications
from tests.helpers import open_day

BLOCKED_DATES_URL = "/api/admin/blocked-dates"


async def _block(client: AsyncClient, headers: dict, **body) -> dict:
    response = await client.post(BLOCKED_DATES_URL, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.asyncio
async def test_create_blocked_date_posts_ticker_notice(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """Blocking a date stores the block and a priority-1 notice with the same id."""
    day = open_day(5)
    response = await client.post(
        BLOCKED_DATES_URL,
        json={"date": day.isoformat(), "reason": "Doctor on leave"},
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Date blocked successfully"
    data = body["data"]
    assert data["date"] == day.isoformat()
    assert data["timeSlots"] == []
    assert data["reason"] == "Doctor on leave"
    assert data["isActive"] is True
    assert data["blockedBy"] == "1"
    assert data["blockedByName"] == "Admin User"
    assert "notificationStartDate" in data
    assert "notificationEndDate" in data

    notice = (
        await db_session.execute(
            select(ticker_notifications).where(ticker_notifications.c.id == UUID(data["id"]))
        )
    ).fetchone()
    assert notice is not None
    assert notice.type == "blocked_date"
    assert notice.priority == 1
    assert notice.is_active is True
    assert str(notice.related_blocked_date_id) == data["id"]
    assert notice.message == f"Notice: Doctor on leave on {day.isoformat()}"


@pytest.mark.asyncio
async def test_create_blocked_date_with_slots_keeps_order(
    client: AsyncClient,
    admin_headers: dict,
) -> None:
    """Time slots round-trip in the order they were sent."""
    day = open_day(6)
    slots = ["06:00 PM", "10:30 AM", "02:00 PM"]
    await _block(client, admin_headers, date=day.isoformat(), timeSlots=slots, reason="Surgery")

    response = await client.get(
        BLOCKED_DATES_URL,
        params={"startDate": day.isoformat(), "endDate": day.isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 1
    assert body["data"][0]["timeSlots"] == slots


@pytest.mark.asyncio
async def test_create_blocked_date_in_past_rejected(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """Yesterday cannot be blocked and nothing is stored."""
    yesterday = clinic_today() - timedelta(days=1)
    response = await client.post(
        BLOCKED_DATES_URL,
        json={"date": yesterday.isoformat(), "reason": "Too late"},
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "message": "Cannot block dates in the past"}

    count = (await db_session.execute(select(func.count()).select_from(blocked_dates))).scalar()
    assert count == 0
    notice_count = (
        await db_session.execute(select(func.count()).select_from(ticker_notifications))
    ).scalar()
    assert notice_count == 0


@pytest.mark.asyncio
async def test_create_blocked_date_today_allowed(
    client: AsyncClient,
    admin_headers: dict,
) -> None:
    """Today is not in the past."""
    response = await client.post(
        BLOCKED_DATES_URL,
        json={"date": clinic_today().isoformat(), "reason": "Emergency surgery"},
        headers=admin_headers,
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_duplicate_active_block_conflicts(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """A second active block on the same date is rejected with 409."""
    day = open_day(7)
    await _block(client, admin_headers, date=day.isoformat(), reason="Conference")

    response = await client.post(
        BLOCKED_DATES_URL,
        json={"date": day.isoformat(), "reason": "Again"},
        headers=admin_headers,
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Date is already blocked"

    notices = (
        await db_session.execute(select(func.count()).select_from(ticker_notifications))
    ).scalar()
    assert notices == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("body", "field", "message"),
    [
        ({"date": "2025/09/19", "reason": "Leave"}, "date", "Invalid date format. Use YYYY-MM-DD"),
        ({"date": "2025-02-30", "reason": "Leave"}, "date", "Invalid date format. Use YYYY-MM-DD"),
        ({"date": "2099-01-05", "reason": "   "}, "reason", "Reason is required"),
        ({"date": "2099-01-05", "reason": "x" * 51}, "reason", "Reason must be 10 words or less"),
        (
            {"date": "2099-01-05", "reason": "Leave", "timeSlots": ["03:00 PM"]},
            "timeSlots",
            "Invalid time slot: 03:00 PM",
        ),
    ],
)
async def test_create_blocked_date_validation(
    client: AsyncClient,
    admin_headers: dict,
    body: dict,
    field: str,
    message: str,
) -> None:
    """Malformed bodies are rejected with field-level messages."""
    response = await client.post(BLOCKED_DATES_URL, json=body, headers=admin_headers)

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert {"field": field, "message": message} in payload["errors"]


@pytest.mark.asyncio
async def test_unauthenticated_requests_rejected(client: AsyncClient, db_session) -> None:
    """Without a session every admin operation answers 401 and changes nothing."""
    day = open_day(5).isoformat()
    block_id = str(uuid4())

    responses = [
        await client.get(BLOCKED_DATES_URL),
        await client.post(BLOCKED_DATES_URL, json={"date": day, "reason": "Leave"}),
        await client.patch(f"{BLOCKED_DATES_URL}?id={block_id}", json={"reason": "Leave"}),
        await client.delete(f"{BLOCKED_DATES_URL}?id={block_id}"),
    ]

    for response in responses:
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "Unauthorized. Admin access required.",
        }

    count = (await db_session.execute(select(func.count()).select_from(blocked_dates))).scalar()
    assert count == 0
    notice_count = (
        await db_session.execute(select(func.count()).select_from(ticker_notifications))
    ).scalar()
    assert notice_count == 0


@pytest.mark.asyncio
async def test_invalid_session_token_rejected(client: AsyncClient) -> None:
    """A forged token is not a session."""
    response = await client.get(
        BLOCKED_DATES_URL,
        headers={"Authorization": "Bearer not-a-real-token"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_blocked_dates_filters_and_sorts(
    client: AsyncClient,
    admin_headers: dict,
) -> None:
    """Results come back ascending by date and honour the filters."""
    first, second, third = open_day(10), open_day(20), open_day(30)
    for day in (third, first, second):
        await _block(client, admin_headers, date=day.isoformat(), reason="Leave")

    response = await client.get(BLOCKED_DATES_URL, headers=admin_headers)
    dates = [item["date"] for item in response.json()["data"]]
    assert dates == [first.isoformat(), second.isoformat(), third.isoformat()]

    response = await client.get(
        BLOCKED_DATES_URL,
        params={"startDate": second.isoformat(), "endDate": third.isoformat()},
        headers=admin_headers,
    )
    body = response.json()
    assert body["count"] == 2
    assert [item["date"] for item in body["data"]] == [second.isoformat(), third.isoformat()]


@pytest.mark.asyncio
async def test_list_blocked_dates_rejects_bad_filter_date(
    client: AsyncClient,
    admin_headers: dict,
) -> None:
    response = await client.get(
        BLOCKED_DATES_URL,
        params={"startDate": "19-09-2025"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid date format. Use YYYY-MM-DD"


@pytest.mark.asyncio
async def test_update_requires_valid_id(client: AsyncClient, admin_headers: dict) -> None:
    """Missing, malformed and unknown ids each get their own answer."""
    response = await client.patch(BLOCKED_DATES_URL, json={"reason": "x"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Blocked date ID is required"

    response = await client.patch(
        f"{BLOCKED_DATES_URL}?id=not-a-uuid", json={"reason": "x"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid blocked date ID"

    response = await client.patch(
        f"{BLOCKED_DATES_URL}?id={uuid4()}", json={"reason": "x"}, headers=admin_headers
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Blocked date not found"


@pytest.mark.asyncio
async def test_update_reason_rewrites_notice(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    """A new reason rewrites the notice text; repeating the PATCH changes nothing more."""
    day = open_day(4)
    block = await _block(
        client, admin_headers, date=day.isoformat(), timeSlots=["10:30 AM"], reason="Leave"
    )

    body = {"reason": "Medical conference"}
    first = await client.patch(f"{BLOCKED_DATES_URL}?id={block['id']}", json=body, headers=admin_headers)
    second = await client.patch(f"{BLOCKED_DATES_URL}?id={block['id']}", json=body, headers=admin_headers)

    assert first.status_code == 200
    assert first.json()["message"] == "Blocked date updated successfully"
    assert second.status_code == 200
    assert first.json()["data"]["reason"] == second.json()["data"]["reason"] == "Medical conference"

    notice = (await db_session.execute(select(ticker_notifications))).fetchone()
    assert notice.message == f"Notice: Medical conference on {day.isoformat()} (10:30 AM)"
    assert notice.is_active is True


@pytest.mark.asyncio
async def test_update_is_active_mirrors_notice(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    day = open_day(4)
    block = await _block(client, admin_headers, date=day.isoformat(), reason="Leave")

    response = await client.patch(
        f"{BLOCKED_DATES_URL}?id={block['id']}", json={"isActive": False}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["isActive"] is False

    notice = (await db_session.execute(select(ticker_notifications))).fetchone()
    assert notice.is_active is False

    await client.patch(
        f"{BLOCKED_DATES_URL}?id={block['id']}",
        json={"reason": "Leave extended"},
        headers=admin_headers,
    )
    notice = (await db_session.execute(select(ticker_notifications))).fetchone()
    assert notice.is_active is True


@pytest.mark.asyncio
async def test_repeated_deactivation_is_idempotent(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    day = open_day(4)
    block = await _block(client, admin_headers, date=day.isoformat(), reason="Leave")
    url = f"{BLOCKED_DATES_URL}?id={block['id']}"

    first = await client.patch(url, json={"isActive": False}, headers=admin_headers)
    second = await client.patch(url, json={"isActive": False}, headers=admin_headers)

    assert first.status_code == second.status_code == 200
    assert first.json()["data"]["isActive"] is False
    assert second.json()["data"]["isActive"] is False

    notice = (await db_session.execute(select(ticker_notifications))).fetchone()
    assert notice.is_active is False
    rows = (await db_session.execute(select(func.count()).select_from(blocked_dates))).scalar()
    assert rows == 1


@pytest.mark.asyncio
async def test_update_reason_with_deactivation_keeps_notice_off(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    day = open_day(4)
    block = await _block(client, admin_headers, date=day.isoformat(), reason="Leave")

    await client.patch(
        f"{BLOCKED_DATES_URL}?id={block['id']}",
        json={"reason": "Cancelled leave", "isActive": False},
        headers=admin_headers,
    )

    notice = (await db_session.execute(select(ticker_notifications))).fetchone()
    assert notice.is_active is False
    assert notice.message == f"Notice: Cancelled leave on {day.isoformat()}"


@pytest.mark.asyncio
async def test_reactivation_onto_blocked_date_conflicts(
    client: AsyncClient,
    admin_headers: dict,
) -> None:
    """An inactive block cannot come back while another block holds its date."""
    day = open_day(8)
    old = await _block(client, admin_headers, date=day.isoformat(), reason="Leave")
    await client.patch(
        f"{BLOCKED_DATES_URL}?id={old['id']}", json={"isActive": False}, headers=admin_headers
    )
    await _block(client, admin_headers, date=day.isoformat(), reason="New leave")

    response = await client.patch(
        f"{BLOCKED_DATES_URL}?id={old['id']}", json={"isActive": True}, headers=admin_headers
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Date is already blocked"


@pytest.mark.asyncio
async def test_delete_blocked_date_removes_notice(
    client: AsyncClient,
    admin_headers: dict,
    db_session,
) -> None:
    day = open_day(1)
    block = await _block(client, admin_headers, date=day.isoformat(), reason="Leave")

    response = await client.delete(f"{BLOCKED_DATES_URL}?id={block['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Blocked date deleted successfully"}

    for table in (blocked_dates, ticker_notifications):
        count = (await db_session.execute(select(func.count()).select_from(table))).scalar()
        assert count == 0

    ticker = await client.get("/api/ticker/notifications")
    assert ticker.json()["data"] == []

    response = await client.delete(f"{BLOCKED_DATES_URL}?id={block['id']}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_range_lists_active_blocks_by_date(
    client: AsyncClient,
    admin_headers: dict,
) -> None:
    """The public range lookup keys active blocks by date."""
    full_day, partial_day, inactive_day = open_day(2), open_day(9), open_day(16)
    await _block(client, admin_headers, date=full_day.isoformat(), reason="Leave")
    await _block(
        client,
        admin_headers,
        date=partial_day.isoformat(),
        timeSlots=["06:00 PM", "06:30 PM"],
        reason="Evening surgery",
    )
    inactive = await _block(client, admin_headers, date=inactive_day.isoformat(), reason="Off")
    await client.patch(
        f"{BLOCKED_DATES_URL}?id={inactive['id']}", json={"isActive": False}, headers=admin_headers
    )

    response = await client.get(
        f"{BLOCKED_DATES_URL}/range",
        params={"startDate": full_day.isoformat(), "endDate": inactive_day.isoformat()},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert body["data"][full_day.isoformat()] == {
        "reason": "Leave",
        "timeSlots": [],
        "isFullDayBlocked": True,
    }
    assert body["data"][partial_day.isoformat()]["isFullDayBlocked"] is False
    assert inactive_day.isoformat() not in body["data"]
    assert body["range"] == {
        "startDate": full_day.isoformat(),
        "endDate": inactive_day.isoformat(),
    }


@pytest.mark.asyncio
async def test_range_requires_ordered_bounds(client: AsyncClient) -> None:
    response = await client.get(f"{BLOCKED_DATES_URL}/range", params={"startDate": "2099-01-10"})
    assert response.status_code == 400

    response = await client.get(
        f"{BLOCKED_DATES_URL}/range",
        params={"startDate": "2099-01-10", "endDate": "2099-01-01"},
    )
    assert response.status_code == 400
