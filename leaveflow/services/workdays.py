"""Working-day arithmetic over weekends and the holiday table."""

# ruff: noqa: TC003
from __future__ import annotations

import uuid
from calendar import monthrange
from datetime import date, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leaveflow.config import get_settings
from leaveflow.exceptions import AppError
from leaveflow.models.holiday import Holiday
from leaveflow.services.directory import get_user_directory

if TYPE_CHECKING:
    from collections.abc import Collection

    from sqlalchemy.ext.asyncio import AsyncSession

_ONE_DAY = timedelta(days=1)
_SATURDAY = 5


def is_working_day(day: date, holidays: Collection[date]) -> bool:
    return day.weekday() < _SATURDAY and day not in holidays


def count_working_days(start: date, end: date, holidays: Collection[date]) -> int:
    """Number of working days in the inclusive range [start, end]."""
    total = 0
    current = start
    while current <= end:
        if is_working_day(current, holidays):
            total += 1
        current += _ONE_DAY
    return total


def working_date_offset(start: date, days: int, holidays: Collection[date]) -> date:
    """Date of the ``days``-th working day counted from ``start`` inclusive.

    A one-day absence starting on a working day ends the same day. A start on a
    weekend or holiday rolls forward to the next working day first.
    """
    if days <= 0:
        return start
    remaining = days
    current = start
    while True:
        if is_working_day(current, holidays):
            remaining -= 1
            if remaining == 0:
                return current
        current += _ONE_DAY


def months_before(day: date, months: int) -> date:
    """Same day-of-month ``months`` earlier, clamped to the month's last day."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    _, days_in_month = monthrange(year, month)
    return date(year, month, min(day.day, days_in_month))


async def fetch_holiday_dates(session: AsyncSession, start: date, end: date) -> set[date]:
    """Fetch holidays in the given inclusive date range."""
    result = await session.execute(
        select(col(Holiday.date)).where(
            col(Holiday.date) >= start,
            col(Holiday.date) <= end,
        )
    )
    return {row[0] for row in result.all()}


async def get_working_date(session: AsyncSession, start: date, days: int) -> date:
    """Resolve ``working_date_offset`` against the stored holidays."""
    # Weekends alone need at most 7/5 of the span; widen until the result lands inside the window.
    window_end = start + timedelta(days=days * 2 + 14)
    while True:
        holidays = await fetch_holiday_dates(session, start, window_end)
        result = working_date_offset(start, days, holidays)
        if result <= window_end:
            return result
        window_end += timedelta(days=days * 2 + 14)


async def calculate_request_days(
    session: AsyncSession,
    user_id: uuid.UUID,
    start: date,
    end: date,
) -> float:
    """Cost of a leave period in days for the given user.

    Counts working days in [start, end] (weekends and holidays excluded) and
    scales them by the user's daily work time relative to a full day, so a
    half-time employee pays half a day per working day. Users missing from the
    directory are treated as full-time.
    """
    settings = get_settings()
    user = await get_user_directory().get_user(user_id)
    work_time = user.work_time if user else settings.full_day_hours

    holidays = await fetch_holiday_dates(session, start, end)
    working_days = count_working_days(start, end, holidays)
    if working_days <= 0:
        raise AppError("Request covers no working days after excluding weekends and holidays", status_code=400)

    return working_days * work_time / settings.full_day_hours
