# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from leaveflow.models.base import TimestampMixin, UUIDBase
from leaveflow.models.enums import ApprovalStatus


class ApprovalRecord(UUIDBase, TimestampMixin, table=True):
    """A single approver's decision on a leave request."""

    __tablename__ = "approval_record"

    request_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("leave_request.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    leader_id: uuid.UUID = Field(index=True)
    status: str = Field(
        default=ApprovalStatus.PENDING, max_length=50, sa_column_kwargs={"server_default": "PENDING"}
    )
    decider_id: uuid.UUID | None = None
    decided_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]

    @property
    def is_accepted(self) -> bool:
        return self.status == ApprovalStatus.ACCEPTED.value
