"""Seed script for development data.

Run with:  python -m leaveflow.seed

The user directory is in-memory, so re-run the script after every API restart.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"
ADMIN_ID = "00000000-0000-0000-0000-000000000001"

HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": ADMIN_ID,
    "X-Role": "admin",
}

# Well-known user UUIDs
LEADER_ID = "00000000-0000-0000-0000-000000000002"
ALICE_ID = "00000000-0000-0000-0000-000000000003"
BOB_ID = "00000000-0000-0000-0000-000000000004"

USERS = [
    {"id": ADMIN_ID, "mail": "admin@example.com", "name": "Ada Admin", "admin": True},
    {"id": LEADER_ID, "mail": "leo.leader@example.com", "name": "Leo Leader"},
    {
        "id": ALICE_ID,
        "mail": "alice.johnson@example.com",
        "name": "Alice Johnson",
        "teams": [{"name": "Backend", "leader_mail": "leo.leader@example.com"}],
    },
    {
        "id": BOB_ID,
        "mail": "bob.smith@example.com",
        "name": "Bob Smith",
        "work_time": 4.0,
        "teams": [{"name": "Backend", "leader_mail": "leo.leader@example.com"}],
    },
]

HOLIDAYS = [
    {"date": "2026-01-01", "name": "Nowy Rok"},
    {"date": "2026-01-06", "name": "Trzech Króli"},
    {"date": "2026-04-06", "name": "Poniedziałek Wielkanocny"},
    {"date": "2026-05-01", "name": "Święto Pracy"},
    {"date": "2026-06-04", "name": "Boże Ciało"},
    {"date": "2026-11-11", "name": "Narodowe Święto Niepodległości"},
    {"date": "2026-12-25", "name": "Boże Narodzenie"},
]

# Pool grants: (user_id, amount_days, reason)
ADJUSTMENTS = [
    (ALICE_ID, 26.0, "Yearly holiday pool"),
    (BOB_ID, 13.0, "Yearly holiday pool (half-time)"),
]


def _user_headers(user_id: str) -> dict[str, str]:
    return {"Content-Type": "application/json", "X-User-Id": user_id}


async def _safe_post(
    client: httpx.AsyncClient,
    url: str,
    json: dict,
    label: str,
    headers: dict[str, str] = HEADERS,
) -> dict | None:
    """POST with 409-conflict tolerance for idempotency."""
    resp = await client.post(url, json=json, headers=headers)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} (already exists)")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_users(client: httpx.AsyncClient) -> None:
    """Seed the directory via PUT (upsert)."""
    print("\n--- Seeding users ---")
    for user in USERS:
        body = {k: v for k, v in user.items() if k != "id"}
        resp = await client.put(f"{BASE_URL}/users/{user['id']}", json=body, headers=HEADERS)
        if resp.status_code == 200:
            print(f"  [OK] {user['name']}")
        else:
            print(f"  [ERROR] {user['name']}: {resp.status_code} {resp.text[:200]}")


async def seed_holidays(client: httpx.AsyncClient) -> None:
    print("\n--- Seeding holidays ---")
    for holiday in HOLIDAYS:
        await _safe_post(client, f"{BASE_URL}/holidays", holiday, f"Holiday: {holiday['name']}")


async def seed_adjustments(client: httpx.AsyncClient) -> None:
    """Grant pools (skip users that already have days)."""
    print("\n--- Seeding adjustments ---")
    for user_id, amount, reason in ADJUSTMENTS:
        resp = await client.get(f"{BASE_URL}/users/{user_id}/balance", headers=HEADERS)
        if resp.status_code == 200 and resp.json()["remaining_days"] > 0:
            print(f"  [SKIP] {user_id[-4:]} (balance already {resp.json()['remaining_days']:g} days)")
            continue
        await _safe_post(
            client,
            f"{BASE_URL}/adjustments",
            {"user_id": user_id, "amount_days": amount, "reason": reason},
            f"Grant {user_id[-4:]} +{amount:g} days",
        )


def _next_monday(weeks_ahead: int) -> date:
    today = date.today()
    return today + timedelta(days=7 - today.weekday() + 7 * (weeks_ahead - 1))


async def seed_requests(client: httpx.AsyncClient) -> None:
    """Seed a pending, an accepted and an occasional request."""
    print("\n--- Seeding requests ---")

    # Alice: one week, stays PENDING for the leader.
    start = _next_monday(3)
    await _safe_post(
        client,
        f"{BASE_URL}/requests/normal",
        {"start_date": start.isoformat(), "end_date": (start + timedelta(days=4)).isoformat()},
        "Request: Alice 5-day vacation (PENDING)",
        headers=_user_headers(ALICE_ID),
    )

    # Bob: two days, accepted by an admin.
    start = _next_monday(2)
    result = await _safe_post(
        client,
        f"{BASE_URL}/requests/normal",
        {"start_date": start.isoformat(), "end_date": (start + timedelta(days=1)).isoformat()},
        "Request: Bob 2-day vacation",
        headers=_user_headers(BOB_ID),
    )
    if result:
        req_id = result["request"]["id"]
        resp = await client.post(f"{BASE_URL}/requests/{req_id}/accept", headers=HEADERS)
        if resp.status_code == 200:
            print("  [OK] Accepted Bob's request")
        else:
            print(f"  [ERROR] Accepting Bob's request: {resp.status_code}")

    # Alice: occasional absence, accepted on submission.
    await _safe_post(
        client,
        f"{BASE_URL}/requests/occasional",
        {
            "start_date": (_next_monday(6) + timedelta(days=3)).isoformat(),
            "occasion": {"type": "CHILD_WEDDING", "info": "Daughter's wedding"},
        },
        "Request: Alice occasional (ACCEPTED)",
        headers=_user_headers(ALICE_ID),
    )


async def main() -> None:
    print("=" * 60)
    print("  Leaveflow Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            print("Make sure the API is running (uvicorn leaveflow.main:app)")
            sys.exit(1)

        await seed_users(client)
        await seed_holidays(client)
        await seed_adjustments(client)
        await seed_requests(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
