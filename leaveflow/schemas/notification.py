# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from leaveflow.models.enums import NotificationKind


class NotificationEvent(BaseModel):
    """Fire-and-forget event for the mailer; recipients are user mails."""

    kind: NotificationKind
    request_id: uuid.UUID
    requester_id: uuid.UUID
    recipients: list[str] = Field(default_factory=list)
