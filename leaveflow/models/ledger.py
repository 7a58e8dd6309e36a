# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import UUIDBase, now_utc


class LedgerEntry(UUIDBase, table=True):
    """Append-only holiday pool entry; the remaining pool is the running sum of counted entries."""

    __tablename__ = "holiday_ledger_entry"
    __table_args__ = (sa.Index("ix_ledger_user_effective", "user_id", "effective_on"),)

    user_id: uuid.UUID = Field(index=True)
    request_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_request.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    entry_type: str = Field(max_length=50)
    amount_days: float
    reason: str | None = None
    actor_id: uuid.UUID | None = None
    effective_on: date
    created_at: datetime = Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
