from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import extract, func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from leaveflow.exceptions import AppError
from leaveflow.models.enums import AuditAction, AuditEntityType
from leaveflow.models.holiday import Holiday
from leaveflow.schemas.holiday import (
    HolidayListResponse,
    HolidayResponse,
    WorkingDateResponse,
    WorkingDaysResponse,
)
from leaveflow.services.audit import model_to_audit_dict, write_audit_log
from leaveflow.services.workdays import (
    calculate_request_days,
    count_working_days,
    fetch_holiday_dates,
    get_working_date,
)

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.schemas.auth import AuthContext
    from leaveflow.schemas.holiday import CreateHolidayRequest


def _build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        date=holiday.date,
        name=holiday.name,
    )


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Declare a company-wide day off. One holiday per date."""
    existing = await session.execute(select(Holiday).where(col(Holiday.date) == payload.date))
    if existing.scalar_one_or_none() is not None:
        raise AppError("Holiday already exists for this date", status_code=409)

    holiday = Holiday(date=payload.date, name=payload.name)
    session.add(holiday)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Holiday already exists for this date", status_code=409) from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(holiday),
    )

    await session.commit()
    await session.refresh(holiday)
    return _build_holiday_response(holiday)


async def list_holidays(
    session: AsyncSession,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """List holidays in date order, optionally for one year."""
    base_filter = []

    if year is not None:
        base_filter.append(extract("year", col(Holiday.date)) == year)

    count_result = await session.execute(select(func.count()).select_from(Holiday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Holiday).where(*base_filter).order_by(col(Holiday.date)).offset(offset).limit(limit)
    )
    holidays = list(result.scalars().all())

    return HolidayListResponse(
        items=[_build_holiday_response(h) for h in holidays],
        total=total,
    )


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    """Get a single holiday or raise 404."""
    result = await session.execute(select(Holiday).where(col(Holiday.id) == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise AppError("Holiday not found", status_code=404)
    return holiday


async def delete_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> None:
    """Delete a holiday."""
    holiday = await get_holiday(session, holiday_id)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(holiday),
    )

    await session.delete(holiday)
    await session.commit()


# ---------------------------------------------------------------------------
# Calendar queries
# ---------------------------------------------------------------------------


async def count_working_days_between(
    session: AsyncSession,
    auth: AuthContext,
    start_date: date,
    end_date: date,
) -> WorkingDaysResponse:
    """Working days in [start_date, end_date] and their cost for the caller."""
    if end_date < start_date:
        raise AppError("end_date must not be before start_date", status_code=400)

    holidays = await fetch_holiday_dates(session, start_date, end_date)
    working_days = count_working_days(start_date, end_date, holidays)
    cost = await calculate_request_days(session, auth.user_id, start_date, end_date) if working_days else 0.0
    return WorkingDaysResponse(
        start_date=start_date,
        end_date=end_date,
        working_days=working_days,
        cost_days=cost,
    )


async def resolve_working_date(session: AsyncSession, start_date: date, days: int) -> WorkingDateResponse:
    end_date = await get_working_date(session, start_date, days)
    return WorkingDateResponse(start_date=start_date, days=days, end_date=end_date)
