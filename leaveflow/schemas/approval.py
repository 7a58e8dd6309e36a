# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel

from leaveflow.models.enums import ApprovalStatus
from leaveflow.schemas.notification import NotificationEvent


class ApprovalResponse(BaseModel):
    """Response schema for an approval record."""

    id: uuid.UUID
    request_id: uuid.UUID
    leader_id: uuid.UUID
    status: ApprovalStatus
    decider_id: uuid.UUID | None
    decided_at: datetime | None
    created_at: datetime


class ApprovalListResponse(BaseModel):
    """List of approval records."""

    items: list[ApprovalResponse]
    total: int


class ApprovalDecisionResponse(BaseModel):
    """Result of a leader's decision on one approval record."""

    approval: ApprovalResponse
    success: bool
    events: list[NotificationEvent]
