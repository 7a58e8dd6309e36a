# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query

from leaveflow.api.deps import AdminDep, AuthDep
from leaveflow.db import SessionDep
from leaveflow.schemas.holiday import (
    CreateHolidayRequest,
    HolidayListResponse,
    HolidayResponse,
    WorkingDateResponse,
    WorkingDaysResponse,
)
from leaveflow.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=201,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Create a holiday (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HolidayListResponse:
    """List holidays with optional year filter."""
    return await holiday_service.list_holidays(session, year, offset, limit)


@holidays_router.delete(
    "/{holiday_id}",
    status_code=204,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a holiday (admin only)."""
    await holiday_service.delete_holiday(session, auth, holiday_id)


@holidays_router.get(
    "/working-days",
    response_model=WorkingDaysResponse,
)
async def count_working_days(
    session: SessionDep,
    auth: AuthDep,
    start_date: date = Query(),
    end_date: date = Query(),
) -> WorkingDaysResponse:
    """Count working days in a period and price them for the caller."""
    return await holiday_service.count_working_days_between(session, auth, start_date, end_date)


@holidays_router.get(
    "/working-date",
    response_model=WorkingDateResponse,
)
async def resolve_working_date(
    session: SessionDep,
    auth: AuthDep,
    start_date: date = Query(),
    days: int = Query(ge=1, le=366),
) -> WorkingDateResponse:
    """Date on which an absence of ``days`` working days starting at ``start_date`` ends."""
    return await holiday_service.resolve_working_date(session, start_date, days)
