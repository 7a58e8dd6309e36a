"""Integration tests for the holiday calendar API, authorization and audit."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leaveflow.models.audit import AuditLog

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

USER_ID = uuid.uuid4()
ADMIN_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "admin"}
EMPLOYEE_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "employee"}
BASE_URL = "/holidays"


def _holiday_payload(date: str = "2026-11-11", name: str = "Independence Day") -> dict:
    return {"date": date, "name": name}


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_holiday(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=ADMIN_HEADERS)
    assert resp.status_code == 201
    data = resp.json()
    assert data["date"] == "2026-11-11"
    assert data["name"] == "Independence Day"
    assert "id" in data


async def test_create_holiday_empty_name(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(name=""), headers=ADMIN_HEADERS)
    assert resp.status_code == 422


async def test_duplicate_date_returns_409(async_client: AsyncClient) -> None:
    payload = _holiday_payload("2026-05-01", "Labour Day")
    resp1 = await async_client.post(BASE_URL, json=payload, headers=ADMIN_HEADERS)
    assert resp1.status_code == 201

    resp2 = await async_client.post(BASE_URL, json={**payload, "name": "Other"}, headers=ADMIN_HEADERS)
    assert resp2.status_code == 409


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


async def test_list_holidays_empty(async_client: AsyncClient) -> None:
    resp = await async_client.get(BASE_URL, headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"items": [], "total": 0}


async def test_list_holidays_sorted_by_date(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2026-12-25", "Christmas Day"), headers=ADMIN_HEADERS)
    await async_client.post(BASE_URL, json=_holiday_payload("2026-11-01", "All Saints"), headers=ADMIN_HEADERS)

    resp = await async_client.get(BASE_URL, headers=ADMIN_HEADERS)
    data = resp.json()
    assert data["total"] == 2
    assert [h["date"] for h in data["items"]] == ["2026-11-01", "2026-12-25"]


async def test_list_holidays_year_filter(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2026-12-25", "Christmas 2026"), headers=ADMIN_HEADERS)
    await async_client.post(BASE_URL, json=_holiday_payload("2027-01-01", "New Year 2027"), headers=ADMIN_HEADERS)

    data_2026 = (await async_client.get(f"{BASE_URL}?year=2026", headers=ADMIN_HEADERS)).json()
    assert data_2026["total"] == 1
    assert data_2026["items"][0]["date"] == "2026-12-25"

    data_2027 = (await async_client.get(f"{BASE_URL}?year=2027", headers=ADMIN_HEADERS)).json()
    assert data_2027["total"] == 1
    assert data_2027["items"][0]["date"] == "2027-01-01"


async def test_list_holidays_pagination(async_client: AsyncClient) -> None:
    for i in range(3):
        await async_client.post(
            BASE_URL,
            json=_holiday_payload(f"2026-0{i + 1}-01", f"Holiday {i}"),
            headers=ADMIN_HEADERS,
        )

    data = (await async_client.get(f"{BASE_URL}?offset=0&limit=2", headers=ADMIN_HEADERS)).json()
    assert data["total"] == 3
    assert len(data["items"]) == 2

    data2 = (await async_client.get(f"{BASE_URL}?offset=2&limit=2", headers=ADMIN_HEADERS)).json()
    assert len(data2["items"]) == 1


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


async def test_delete_holiday(async_client: AsyncClient) -> None:
    create_resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=ADMIN_HEADERS)
    holiday_id = create_resp.json()["id"]

    del_resp = await async_client.delete(f"{BASE_URL}/{holiday_id}", headers=ADMIN_HEADERS)
    assert del_resp.status_code == 204

    list_resp = await async_client.get(BASE_URL, headers=ADMIN_HEADERS)
    assert list_resp.json()["total"] == 0


async def test_delete_unknown_holiday(async_client: AsyncClient) -> None:
    resp = await async_client.delete(f"{BASE_URL}/{uuid.uuid4()}", headers=ADMIN_HEADERS)
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


async def test_non_admin_cannot_create(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


async def test_non_admin_cannot_delete(async_client: AsyncClient) -> None:
    create_resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=ADMIN_HEADERS)
    holiday_id = create_resp.json()["id"]

    del_resp = await async_client.delete(f"{BASE_URL}/{holiday_id}", headers=EMPLOYEE_HEADERS)
    assert del_resp.status_code == 403


async def test_employee_can_list(async_client: AsyncClient) -> None:
    resp = await async_client.get(BASE_URL, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------


async def test_create_and_delete_are_audited(async_client: AsyncClient, db_session: AsyncSession) -> None:
    create_resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=ADMIN_HEADERS)
    holiday_id = uuid.UUID(create_resp.json()["id"])
    await async_client.delete(f"{BASE_URL}/{holiday_id}", headers=ADMIN_HEADERS)

    result = await db_session.execute(
        select(AuditLog).where(col(AuditLog.entity_id) == holiday_id).order_by(col(AuditLog.created_at))
    )
    entries = list(result.scalars().all())
    assert [e.action for e in entries] == ["CREATE", "DELETE"]
    assert all(e.entity_type == "HOLIDAY" for e in entries)
    assert all(e.actor_id == USER_ID for e in entries)
    assert entries[0].after_json is not None
    assert entries[0].after_json["name"] == "Independence Day"
    assert entries[1].before_json is not None


# ---------------------------------------------------------------------------
# Calendar queries
# ---------------------------------------------------------------------------


async def test_working_days_excludes_weekends_and_holidays(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2026-11-11", "Independence Day"), headers=ADMIN_HEADERS)

    # Monday 2026-11-09 through Sunday 2026-11-15.
    resp = await async_client.get(
        f"{BASE_URL}/working-days",
        params={"start_date": "2026-11-09", "end_date": "2026-11-15"},
        headers=EMPLOYEE_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["working_days"] == 4
    assert resp.json()["cost_days"] == 4.0


async def test_working_days_weekend_only(async_client: AsyncClient) -> None:
    resp = await async_client.get(
        f"{BASE_URL}/working-days",
        params={"start_date": "2026-11-14", "end_date": "2026-11-15"},
        headers=EMPLOYEE_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["working_days"] == 0
    assert resp.json()["cost_days"] == 0.0


async def test_working_days_invalid_period(async_client: AsyncClient) -> None:
    resp = await async_client.get(
        f"{BASE_URL}/working-days",
        params={"start_date": "2026-11-15", "end_date": "2026-11-09"},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 400


async def test_working_date_skips_holiday(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2026-11-11", "Independence Day"), headers=ADMIN_HEADERS)

    # Two working days from Tuesday 2026-11-10: Tuesday, then Thursday.
    resp = await async_client.get(
        f"{BASE_URL}/working-date",
        params={"start_date": "2026-11-10", "days": 2},
        headers=EMPLOYEE_HEADERS,
    )

    assert resp.status_code == 200
    assert resp.json()["end_date"] == "2026-11-12"


async def test_working_date_rejects_zero_days(async_client: AsyncClient) -> None:
    resp = await async_client.get(
        f"{BASE_URL}/working-date",
        params={"start_date": "2026-11-10", "days": 0},
        headers=EMPLOYEE_HEADERS,
    )
    assert resp.status_code == 422
