# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field


class CreateHolidayRequest(BaseModel):
    """Request body for creating a holiday."""

    date: date
    name: str = Field(min_length=1, max_length=255)


class HolidayResponse(BaseModel):
    """Response schema for a holiday."""

    id: uuid.UUID
    date: date
    name: str


class HolidayListResponse(BaseModel):
    """Paginated list of holidays."""

    items: list[HolidayResponse]
    total: int


class WorkingDaysResponse(BaseModel):
    """Working days in an inclusive period and what they would cost the caller."""

    start_date: date
    end_date: date
    working_days: int
    cost_days: float


class WorkingDateResponse(BaseModel):
    """Last day of an absence of ``days`` working days starting at ``start_date``."""

    start_date: date
    days: int
    end_date: date
