# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leaveflow.exceptions import AppError
from leaveflow.models.approval import ApprovalRecord
from leaveflow.models.base import now_utc
from leaveflow.models.enums import ApprovalStatus, AuditAction, AuditEntityType, RequestStatus
from leaveflow.models.request import LeaveRequest
from leaveflow.schemas.approval import ApprovalDecisionResponse, ApprovalListResponse, ApprovalResponse
from leaveflow.services.audit import model_to_audit_dict, write_audit_log
from leaveflow.services.transitions import (
    check_for_actions,
    get_request_or_404,
    is_valid_request_by_approval,
    list_records,
    set_status,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.schemas.auth import AuthContext
    from leaveflow.schemas.notification import NotificationEvent

logger = logging.getLogger(__name__)


def build_approval_response(record: ApprovalRecord) -> ApprovalResponse:
    """Map an approval record to its response schema."""
    return ApprovalResponse(
        id=record.id,
        request_id=record.request_id,
        leader_id=record.leader_id,
        status=ApprovalStatus(record.status),
        decider_id=record.decider_id,
        decided_at=record.decided_at,
        created_at=record.created_at,
    )


async def _get_record_or_404(session: AsyncSession, record_id: uuid.UUID) -> ApprovalRecord:
    record = await session.get(ApprovalRecord, record_id)
    if record is None:
        raise AppError("Approval record not found", status_code=404)
    return record


# ---------------------------------------------------------------------------
# Record creation (caller commits)
# ---------------------------------------------------------------------------


async def create_record(session: AsyncSession, request: LeaveRequest, leader_id: uuid.UUID) -> ApprovalRecord:
    """Address a pending approval record to a leader."""
    record = ApprovalRecord(request_id=request.id, leader_id=leader_id)
    session.add(record)
    await session.flush()
    return record


async def create_cancel_record(session: AsyncSession, request: LeaveRequest) -> ApprovalRecord:
    """Synthesize the record a cancellation is booked on when a request has none."""
    return await create_record(session, request, request.requester_id)


# ---------------------------------------------------------------------------
# Per-record transitions (caller commits)
# ---------------------------------------------------------------------------


async def accept(
    session: AsyncSession,
    record_id: uuid.UUID,
    decider_id: uuid.UUID,
    outbox: list[NotificationEvent],
) -> bool:
    """Accept one approval record.

    Returns False without changing anything when the record was already
    decided or the request is no longer covered by the requester's pool.
    """
    record = await _get_record_or_404(session, record_id)
    if record.status != ApprovalStatus.PENDING.value:
        logger.info("Approval %s already %s, not accepting", record.id, record.status)
        return False

    if not await is_valid_request_by_approval(session, record.id):
        logger.warning("Approval %s not accepted: request %s exceeds the holiday pool", record.id, record.request_id)
        return False

    record.status = ApprovalStatus.ACCEPTED.value
    record.decider_id = decider_id
    record.decided_at = now_utc()
    await session.flush()

    request = await get_request_or_404(session, record.request_id)
    await check_for_actions(session, request, outbox, actor_id=decider_id)
    return True


async def reject(
    session: AsyncSession,
    record_id: uuid.UUID,
    decider_id: uuid.UUID,
) -> bool:
    """Reject one approval record. Returns False if it was already rejected."""
    record = await _get_record_or_404(session, record_id)
    if record.status == ApprovalStatus.REJECTED.value:
        logger.info("Approval %s already rejected", record.id)
        return False

    record.status = ApprovalStatus.REJECTED.value
    record.decider_id = decider_id
    record.decided_at = now_utc()
    await session.flush()
    return True


# ---------------------------------------------------------------------------
# Leader-facing API
# ---------------------------------------------------------------------------


async def decide_record(
    session: AsyncSession,
    auth: AuthContext,
    record_id: uuid.UUID,
    *,
    accepted: bool,
) -> ApprovalDecisionResponse:
    """A leader accepts or rejects the record addressed to them.

    Any single rejection rejects the whole request. Acceptance of the last
    pending record accepts the request through ``check_for_actions``.
    """
    record = await _get_record_or_404(session, record_id)
    if record.leader_id != auth.user_id and not auth.is_admin:
        raise AppError("Not authorized to decide this approval", status_code=403)

    request = await get_request_or_404(session, record.request_id)
    if request.status != RequestStatus.PENDING.value:
        raise AppError("Only approvals of pending requests can be decided", status_code=400)

    before_dict = model_to_audit_dict(record)
    outbox: list[NotificationEvent] = []

    if accepted:
        success = await accept(session, record.id, auth.user_id, outbox)
    else:
        success = await reject(session, record.id, auth.user_id)
        if success:
            set_status(request, RequestStatus.REJECTED)
            logger.info("Request %s rejected by approver %s", request.id, auth.user_id)

    await session.flush()

    if success:
        await write_audit_log(
            session,
            actor_id=auth.user_id,
            entity_type=AuditEntityType.APPROVAL,
            entity_id=record.id,
            action=AuditAction.ACCEPT if accepted else AuditAction.REJECT,
            before_json=before_dict,
            after_json=model_to_audit_dict(record),
        )

    await session.commit()
    await session.refresh(record)
    return ApprovalDecisionResponse(approval=build_approval_response(record), success=success, events=outbox)


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def list_request_approvals(session: AsyncSession, request_id: uuid.UUID) -> ApprovalListResponse:
    await get_request_or_404(session, request_id)
    records = await list_records(session, request_id)
    return ApprovalListResponse(items=[build_approval_response(r) for r in records], total=len(records))


async def list_pending_for_leader(session: AsyncSession, leader_id: uuid.UUID) -> ApprovalListResponse:
    """Pending records addressed to a leader whose request is still pending."""
    result = await session.execute(
        select(ApprovalRecord)
        .join(LeaveRequest, col(LeaveRequest.id) == col(ApprovalRecord.request_id))
        .where(
            col(ApprovalRecord.leader_id) == leader_id,
            col(ApprovalRecord.status) == ApprovalStatus.PENDING.value,
            col(LeaveRequest.status) == RequestStatus.PENDING.value,
        )
        .order_by(col(ApprovalRecord.created_at))
    )
    records = list(result.scalars().all())
    return ApprovalListResponse(items=[build_approval_response(r) for r in records], total=len(records))
