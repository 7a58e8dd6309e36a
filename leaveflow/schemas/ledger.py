# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from leaveflow.models.enums import LedgerEntryType

# ---------------------------------------------------------------------------
# Balance response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    """Remaining holiday pool of a user."""

    user_id: uuid.UUID
    as_of: date
    remaining_days: float


# ---------------------------------------------------------------------------
# History response schemas
# ---------------------------------------------------------------------------


class LedgerEntryResponse(BaseModel):
    """A single holiday ledger (history) entry."""

    id: uuid.UUID
    user_id: uuid.UUID
    request_id: uuid.UUID | None
    entry_type: LedgerEntryType
    amount_days: float
    reason: str | None
    actor_id: uuid.UUID | None
    effective_on: date
    created_at: datetime


class LedgerListResponse(BaseModel):
    """Paginated history entries."""

    items: list[LedgerEntryResponse]
    total: int


# ---------------------------------------------------------------------------
# Adjustment request schema
# ---------------------------------------------------------------------------


class CreateAdjustmentRequest(BaseModel):
    """Request body for granting or correcting a user's holiday pool."""

    user_id: uuid.UUID
    amount_days: float = Field(
        description="Signed number of days: positive to add, negative to deduct",
    )
    reason: str = Field(min_length=1, max_length=1000)
    effective_on: date | None = None
