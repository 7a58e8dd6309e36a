# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from leaveflow.models.enums import OccasionalType, RequestStatus, RequestType
from leaveflow.schemas.notification import NotificationEvent

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitNormalPayload(BaseModel):
    """Request body for submitting a normal (vacation) request."""

    start_date: date
    end_date: date


class OccasionInfo(BaseModel):
    """Type-specific payload of an occasional request."""

    type: OccasionalType
    duration_days: int | None = Field(default=None, ge=1, le=30)
    info: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _apply_type_defaults(self) -> Self:
        if self.duration_days is None:
            self.duration_days = self.type.duration_days
        if not self.info:
            self.info = self.type.description
        return self


class SubmitOccasionalPayload(BaseModel):
    """Request body for submitting an occasional request."""

    start_date: date
    occasion: OccasionInfo


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class RequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    requester_id: uuid.UUID
    start_date: date
    end_date: date
    type: RequestType
    occasional_type: OccasionalType | None
    occasional_duration_days: int | None
    occasional_info: str | None
    requested_days: float
    status: RequestStatus
    created_at: datetime
    modified_at: datetime


class RequestListResponse(BaseModel):
    """List of leave requests."""

    items: list[RequestResponse]
    total: int


class RequestActionResponse(BaseModel):
    """Result of a lifecycle operation.

    ``success`` is False when at least one underlying approval record could
    not be decided; the request status still reflects the transition.
    """

    request: RequestResponse
    success: bool
    events: list[NotificationEvent] = Field(default_factory=list)
