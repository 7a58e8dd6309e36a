# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import ModifiedMixin, TimestampMixin, UUIDBase
from leaveflow.models.enums import RequestStatus, RequestType


class LeaveRequest(UUIDBase, TimestampMixin, ModifiedMixin, table=True):
    """A time-off request owned by its requester and mutated only by the lifecycle service."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_request_requester_status", "requester_id", "status"),
        sa.CheckConstraint("end_date >= start_date", name="ck_request_period"),
    )

    requester_id: uuid.UUID = Field(index=True)
    start_date: date
    end_date: date
    type: str = Field(default=RequestType.NORMAL, max_length=50)
    occasional_type: str | None = Field(default=None, max_length=50)
    occasional_duration_days: int | None = None
    occasional_info: str | None = None
    requested_days: float = 0.0
    status: str = Field(
        default=RequestStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
