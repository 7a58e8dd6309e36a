"""Shared fixtures data and HTTP helpers for the leave workflow tests."""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import TYPE_CHECKING, Any

from leaveflow.services.directory import InMemoryUserDirectory, TeamInfo, UserInfo

if TYPE_CHECKING:
    from httpx import AsyncClient

ALICE_ID = uuid.uuid4()
BOB_ID = uuid.uuid4()
LEO_ID = uuid.uuid4()
LINA_ID = uuid.uuid4()
ADMIN_ID = uuid.uuid4()

ALICE_MAIL = "alice@example.com"
BOB_MAIL = "bob@example.com"
LEO_MAIL = "leo@example.com"
LINA_MAIL = "lina@example.com"
ADMIN_MAIL = "admin@example.com"

ADMIN_HEADERS = {"X-User-Id": str(ADMIN_ID), "X-Role": "admin"}


def headers(user_id: uuid.UUID, role: str = "employee") -> dict[str, str]:
    return {"X-User-Id": str(user_id), "X-Role": role}


def seed_company(directory: InMemoryUserDirectory, alice_work_time: float = 8.0) -> None:
    """Alice reports to Leo; Bob reports to Leo and Lina (Leo twice, via two teams)."""
    directory.seed(UserInfo(id=LEO_ID, mail=LEO_MAIL, name="Leo Leader"))
    directory.seed(UserInfo(id=LINA_ID, mail=LINA_MAIL, name="Lina Leader"))
    directory.seed(UserInfo(id=ADMIN_ID, mail=ADMIN_MAIL, name="Ada Admin", admin=True))
    directory.seed(
        UserInfo(
            id=ALICE_ID,
            mail=ALICE_MAIL,
            name="Alice Worker",
            work_time=alice_work_time,
            teams=[TeamInfo(name="Backend", leader_mail=LEO_MAIL)],
        )
    )
    directory.seed(
        UserInfo(
            id=BOB_ID,
            mail=BOB_MAIL,
            name="Bob Worker",
            teams=[
                TeamInfo(name="Backend", leader_mail=LEO_MAIL),
                TeamInfo(name="Guild", leader_mail=LINA_MAIL),
                TeamInfo(name="Platform", leader_mail=LEO_MAIL.upper()),
            ],
        )
    )


def monday(weeks_ahead: int = 2) -> date:
    """A Monday at least ``weeks_ahead`` weeks in the future."""
    today = date.today()
    return today + timedelta(days=7 - today.weekday() + 7 * (weeks_ahead - 1))


async def grant(client: AsyncClient, user_id: uuid.UUID, amount: float, reason: str = "Yearly pool") -> None:
    resp = await client.post(
        "/adjustments",
        json={"user_id": str(user_id), "amount_days": amount, "reason": reason},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201, resp.json()


async def submit_normal(
    client: AsyncClient,
    start: date,
    end: date,
    user_id: uuid.UUID = ALICE_ID,
    expected_status: int = 201,
) -> dict[str, Any]:
    resp = await client.post(
        "/requests/normal",
        json={"start_date": start.isoformat(), "end_date": end.isoformat()},
        headers=headers(user_id),
    )
    assert resp.status_code == expected_status, resp.json()
    result: dict[str, Any] = resp.json()
    return result


async def submit_occasional(
    client: AsyncClient,
    start: date,
    occasion: dict[str, Any],
    user_id: uuid.UUID = ALICE_ID,
) -> dict[str, Any]:
    resp = await client.post(
        "/requests/occasional",
        json={"start_date": start.isoformat(), "occasion": occasion},
        headers=headers(user_id),
    )
    assert resp.status_code == 201, resp.json()
    result: dict[str, Any] = resp.json()
    return result


async def approvals_of(client: AsyncClient, request_id: str) -> list[dict[str, Any]]:
    resp = await client.get(f"/requests/{request_id}/approvals", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    items: list[dict[str, Any]] = resp.json()["items"]
    return items


async def history_of(client: AsyncClient, user_id: uuid.UUID = ALICE_ID) -> list[dict[str, Any]]:
    resp = await client.get(f"/users/{user_id}/history", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    items: list[dict[str, Any]] = resp.json()["items"]
    return items


async def balance_of(client: AsyncClient, user_id: uuid.UUID = ALICE_ID) -> float:
    resp = await client.get(f"/users/{user_id}/balance", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    remaining: float = resp.json()["remaining_days"]
    return remaining
