"""State-transition helpers shared by the request lifecycle and the approval tracker."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leaveflow.exceptions import AppError
from leaveflow.models.approval import ApprovalRecord
from leaveflow.models.base import now_utc
from leaveflow.models.enums import NotificationKind, RequestStatus
from leaveflow.models.request import LeaveRequest
from leaveflow.schemas.notification import NotificationEvent
from leaveflow.services import ledger as ledger_service
from leaveflow.services.directory import get_user_directory, leader_mails

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a request by ID. Raises 404 if not found."""
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise AppError("Request not found", status_code=404)
    return request


async def list_records(session: AsyncSession, request_id: uuid.UUID) -> list[ApprovalRecord]:
    """Approval records of a request in creation order."""
    result = await session.execute(
        select(ApprovalRecord)
        .where(col(ApprovalRecord.request_id) == request_id)
        .order_by(col(ApprovalRecord.created_at), col(ApprovalRecord.id))
    )
    return list(result.scalars().all())


def set_status(request: LeaveRequest, status: RequestStatus) -> None:
    request.status = status.value
    request.modified_at = now_utc()


# ---------------------------------------------------------------------------
# Balance coverage (recomputed on every call)
# ---------------------------------------------------------------------------


async def is_request_covered(session: AsyncSession, request: LeaveRequest) -> bool:
    remaining = await ledger_service.remaining_balance(session, request.requester_id, as_of=date.today())
    return remaining >= request.requested_days


async def is_valid_request_by_approval(session: AsyncSession, record_id: uuid.UUID) -> bool:
    """Whether the request behind an approval record is still covered by the requester's pool."""
    record = await session.get(ApprovalRecord, record_id)
    if record is None:
        raise AppError("Approval record not found", status_code=404)
    request = await get_request_or_404(session, record.request_id)
    return await is_request_covered(session, request)


async def is_valid_request_by_request(session: AsyncSession, request_id: uuid.UUID) -> bool:
    """Whether a request is still covered by the requester's pool."""
    request = await get_request_or_404(session, request_id)
    return await is_request_covered(session, request)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------


async def requester_recipients(request: LeaveRequest) -> list[str]:
    requester = await get_user_directory().get_user(request.requester_id)
    return [requester.mail] if requester else []


async def admin_and_leader_recipients(request: LeaveRequest) -> list[str]:
    directory = get_user_directory()
    mails: list[str] = [u.mail for u in await directory.list_users() if u.admin]
    requester = await directory.get_user(request.requester_id)
    if requester is not None:
        mails.extend(leader_mails(requester))
    # Distinct, case-insensitive, keeping first spelling.
    unique: dict[str, str] = {}
    for mail in mails:
        unique.setdefault(mail.lower(), mail)
    return list(unique.values())


def build_event(kind: NotificationKind, request: LeaveRequest, recipients: list[str]) -> NotificationEvent:
    return NotificationEvent(
        kind=kind,
        request_id=request.id,
        requester_id=request.requester_id,
        recipients=recipients,
    )


# ---------------------------------------------------------------------------
# Unanimous acceptance
# ---------------------------------------------------------------------------


async def check_for_actions(
    session: AsyncSession,
    request: LeaveRequest,
    outbox: list[NotificationEvent],
    actor_id: uuid.UUID | None = None,
) -> bool:
    """Accept a pending request once every approval record is accepted.

    Posts the pool deduction and queues the acceptance notification. This is
    the only place a normal request's deduction is written, so it fires at
    most once per request. Returns True when the transition happened.
    """
    if request.status != RequestStatus.PENDING.value:
        return False

    records = await list_records(session, request.id)
    if not all(record.is_accepted for record in records):
        return False

    set_status(request, RequestStatus.ACCEPTED)
    await ledger_service.insert(session, request, actor_id=actor_id)
    outbox.append(build_event(NotificationKind.REQUEST_ACCEPTED, request, await requester_recipients(request)))
    logger.info("Request %s accepted by all %d approvers", request.id, len(records))
    return True
