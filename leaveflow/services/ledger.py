"""Holiday pool ledger.

The ledger is append-only. Rows of type ADJUSTMENT, USAGE and REVERSAL form the
user's pool; OCCASIONAL rows and their reversals only document special
absences in the history and never count toward the balance.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from leaveflow.exceptions import AppError
from leaveflow.models.enums import AuditAction, AuditEntityType, LedgerEntryType, RequestType
from leaveflow.models.ledger import LedgerEntry
from leaveflow.schemas.ledger import BalanceResponse, LedgerEntryResponse, LedgerListResponse
from leaveflow.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.models.request import LeaveRequest
    from leaveflow.schemas.auth import AuthContext
    from leaveflow.schemas.ledger import CreateAdjustmentRequest

# Entry types that make up the holiday pool (signed amounts).
POOL_ENTRY_TYPES = [
    LedgerEntryType.ADJUSTMENT.value,
    LedgerEntryType.USAGE.value,
    LedgerEntryType.REVERSAL.value,
]


def _build_ledger_entry_response(entry: LedgerEntry) -> LedgerEntryResponse:
    """Map a ledger entry model to its response schema."""
    return LedgerEntryResponse(
        id=entry.id,
        user_id=entry.user_id,
        request_id=entry.request_id,
        entry_type=LedgerEntryType(entry.entry_type),
        amount_days=entry.amount_days,
        reason=entry.reason,
        actor_id=entry.actor_id,
        effective_on=entry.effective_on,
        created_at=entry.created_at,
    )


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------


def balance_date(as_of: date | None = None) -> date:
    """The day a balance is read on when the caller gives none: today."""
    return as_of or date.today()


async def remaining_balance(
    session: AsyncSession,
    user_id: uuid.UUID,
    as_of: date | None = None,
) -> float:
    """Running sum of the user's pool entries effective on or before ``as_of``.

    Entries dated later, such as next year's grant, are not spendable yet.
    """
    result = await session.execute(
        select(func.coalesce(func.sum(col(LedgerEntry.amount_days)), 0.0)).where(
            col(LedgerEntry.user_id) == user_id,
            col(LedgerEntry.entry_type).in_(POOL_ENTRY_TYPES),
            col(LedgerEntry.effective_on) <= balance_date(as_of),
        )
    )
    return float(result.scalar_one())


async def get_balance(
    session: AsyncSession,
    user_id: uuid.UUID,
    as_of: date | None = None,
) -> BalanceResponse:
    as_of = balance_date(as_of)
    remaining = await remaining_balance(session, user_id, as_of)
    return BalanceResponse(user_id=user_id, as_of=as_of, remaining_days=remaining)


# ---------------------------------------------------------------------------
# History writes (caller commits)
# ---------------------------------------------------------------------------


async def post_entry(
    session: AsyncSession,
    request: LeaveRequest,
    *,
    amount: float,
    entry_type: LedgerEntryType,
    reason: str | None = None,
    actor_id: uuid.UUID | None = None,
) -> LedgerEntry:
    """Append a ledger entry tied to a leave request within the caller's transaction."""
    entry = LedgerEntry(
        user_id=request.requester_id,
        request_id=request.id,
        entry_type=entry_type.value,
        amount_days=amount,
        reason=reason,
        actor_id=actor_id,
        effective_on=date.today(),
    )
    session.add(entry)
    await session.flush()
    return entry


async def insert(
    session: AsyncSession,
    request: LeaveRequest,
    actor_id: uuid.UUID | None = None,
) -> LedgerEntry:
    """Deduct an accepted normal request from the pool."""
    return await post_entry(
        session,
        request,
        amount=-request.requested_days,
        entry_type=LedgerEntryType.USAGE,
        actor_id=actor_id,
    )


async def insert_with_comment(
    session: AsyncSession,
    request: LeaveRequest,
    comment: str | None,
    actor_id: uuid.UUID,
) -> LedgerEntry:
    """Record an occasional absence in the history without touching the pool."""
    return await post_entry(
        session,
        request,
        amount=-request.requested_days,
        entry_type=LedgerEntryType.OCCASIONAL,
        reason=comment,
        actor_id=actor_id,
    )


async def insert_reversed_with_comment(
    session: AsyncSession,
    request: LeaveRequest,
    comment: str,
    actor_id: uuid.UUID | None = None,
) -> LedgerEntry:
    """Give back what an earlier entry for the request took."""
    entry_type = (
        LedgerEntryType.OCCASIONAL_REVERSAL
        if request.type == RequestType.OCCASIONAL.value
        else LedgerEntryType.REVERSAL
    )
    return await post_entry(
        session,
        request,
        amount=request.requested_days,
        entry_type=entry_type,
        reason=comment,
        actor_id=actor_id,
    )


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_history(
    session: AsyncSession,
    user_id: uuid.UUID,
    offset: int = 0,
    limit: int = 50,
) -> LedgerListResponse:
    """Get paginated history entries for a user, newest first."""
    base_filter = [col(LedgerEntry.user_id) == user_id]

    count_result = await session.execute(select(func.count()).select_from(LedgerEntry).where(*base_filter))
    total = count_result.scalar_one()

    entries_result = await session.execute(
        select(LedgerEntry)
        .where(*base_filter)
        .order_by(
            col(LedgerEntry.effective_on).desc(),
            col(LedgerEntry.created_at).desc(),
        )
        .offset(offset)
        .limit(limit)
    )
    entries = list(entries_result.scalars().all())

    return LedgerListResponse(
        items=[_build_ledger_entry_response(e) for e in entries],
        total=total,
    )


# ---------------------------------------------------------------------------
# Write path: admin adjustments
# ---------------------------------------------------------------------------


async def create_adjustment(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateAdjustmentRequest,
) -> LedgerEntryResponse:
    """Grant or correct a user's holiday pool.

    Deductions may not take the pool below zero.
    """
    if payload.amount_days < 0:
        current = await remaining_balance(session, payload.user_id, as_of=date.today())
        if current + payload.amount_days < 0:
            raise AppError("Insufficient balance for this adjustment", status_code=400)

    entry = LedgerEntry(
        user_id=payload.user_id,
        entry_type=LedgerEntryType.ADJUSTMENT.value,
        amount_days=payload.amount_days,
        reason=payload.reason,
        actor_id=auth.user_id,
        effective_on=payload.effective_on or date.today(),
    )
    session.add(entry)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.ADJUSTMENT,
        entity_id=entry.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(entry),
    )

    await session.commit()
    await session.refresh(entry)
    return _build_ledger_entry_response(entry)
