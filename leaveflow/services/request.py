"""Leave request lifecycle: submission, overlap checks and the approval state machine.

PENDING -> ACCEPTED | REJECTED | CANCELLED, ACCEPTED -> CANCELLED. Occasional
requests are created ACCEPTED. Every public operation is one unit of work and
commits once at its end; notifications are returned to the caller, not sent.
"""

# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from leaveflow.config import get_settings
from leaveflow.exceptions import AppError, InvalidRequestPeriodError, NotEnoughDaysError, RequestOverlappingError
from leaveflow.models.enums import (
    ApprovalStatus,
    AuditAction,
    AuditEntityType,
    NotificationKind,
    OccasionalType,
    RequestStatus,
    RequestType,
)
from leaveflow.models.request import LeaveRequest
from leaveflow.schemas.request import RequestListResponse, RequestResponse
from leaveflow.services import approval as approval_service
from leaveflow.services import ledger as ledger_service
from leaveflow.services.audit import model_to_audit_dict, write_audit_log
from leaveflow.services.directory import get_user_directory, leader_mails
from leaveflow.services.transitions import (
    admin_and_leader_recipients,
    build_event,
    check_for_actions,
    get_request_or_404,
    is_valid_request_by_approval,
    is_valid_request_by_request,
    list_records,
    requester_recipients,
    set_status,
)
from leaveflow.services.workdays import calculate_request_days, get_working_date, months_before

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leaveflow.schemas.auth import AuthContext
    from leaveflow.schemas.notification import NotificationEvent
    from leaveflow.schemas.request import SubmitNormalPayload, SubmitOccasionalPayload
    from leaveflow.services.directory import UserInfo

__all__ = [
    "RequestOutcome",
    "accept",
    "cancel",
    "check_for_actions",
    "get_request",
    "is_valid_request_by_approval",
    "is_valid_request_by_request",
    "list_requests",
    "periods_overlap",
    "reject",
    "submit_normal",
    "submit_occasional",
]

logger = logging.getLogger(__name__)

CANCEL_REASON = "Anulowanie"

_ACTIVE_STATUSES = [RequestStatus.PENDING.value, RequestStatus.ACCEPTED.value]


@dataclass
class RequestOutcome:
    """Result of a lifecycle operation, with the notifications it produced."""

    request: RequestResponse
    success: bool = True
    events: list[NotificationEvent] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: LeaveRequest) -> RequestResponse:
    """Map a request model to its response schema."""
    return RequestResponse(
        id=request.id,
        requester_id=request.requester_id,
        start_date=request.start_date,
        end_date=request.end_date,
        type=RequestType(request.type),
        occasional_type=OccasionalType(request.occasional_type) if request.occasional_type else None,
        occasional_duration_days=request.occasional_duration_days,
        occasional_info=request.occasional_info,
        requested_days=request.requested_days,
        status=RequestStatus(request.status),
        created_at=request.created_at,
        modified_at=request.modified_at,
    )


def periods_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """Inclusive overlap: a shared boundary day counts."""
    return not (a_end < b_start) and not (b_end < a_start)


def _validate_period(start_date: date, end_date: date, today: date) -> None:
    admissible_start = months_before(today, get_settings().backdating_months)
    if end_date < start_date:
        raise InvalidRequestPeriodError("end_date must not be before start_date")
    if start_date <= admissible_start:
        raise InvalidRequestPeriodError(f"start_date must be after {admissible_start.isoformat()}")


async def _is_request_overlapped(
    session: AsyncSession,
    requester_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> bool:
    """Whether a normal period collides with the requester's pending or accepted normal requests."""
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.requester_id) == requester_id,
            col(LeaveRequest.type) == RequestType.NORMAL.value,
            col(LeaveRequest.status).in_(_ACTIVE_STATUSES),
        )
    )
    return any(
        periods_overlap(start_date, end_date, existing.start_date, existing.end_date)
        for existing in result.scalars().all()
    )


async def _get_requester_or_404(user_id: uuid.UUID) -> UserInfo:
    requester = await get_user_directory().get_user(user_id)
    if requester is None:
        raise AppError("User not found", status_code=404)
    return requester


async def _finish(
    session: AsyncSession,
    request: LeaveRequest,
    auth: AuthContext,
    action: AuditAction,
    before_json: dict | None,
) -> RequestResponse:
    """Audit the transition, commit and map to the response schema."""
    await session.flush()
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request.id,
        action=action,
        before_json=before_json,
        after_json=model_to_audit_dict(request),
    )
    await session.commit()
    await session.refresh(request)
    return _build_request_response(request)


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


async def submit_normal(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitNormalPayload,
) -> RequestOutcome:
    """Submit a vacation request for the caller.

    Flow:
    1. Validate the period (ordering, backdating allowance)
    2. Compute the cost in days (weekends, holidays, work time)
    3. Require remaining pool >= cost
    4. Reject overlaps with the caller's active normal requests
    5. Create the request PENDING with one approval record per team leader
    6. Audit and commit
    """
    requester = await _get_requester_or_404(auth.user_id)

    # 1. Period.
    _validate_period(payload.start_date, payload.end_date, date.today())

    # 2. Cost.
    requested_days = await calculate_request_days(session, requester.id, payload.start_date, payload.end_date)

    # 3. Pool.
    remaining = await ledger_service.remaining_balance(session, requester.id, as_of=date.today())
    if remaining < requested_days:
        raise NotEnoughDaysError(remaining, requested_days)

    # 4. Overlap.
    if await _is_request_overlapped(session, requester.id, payload.start_date, payload.end_date):
        raise RequestOverlappingError()

    # 5. Request and approval records.
    request = LeaveRequest(
        requester_id=requester.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        type=RequestType.NORMAL.value,
        requested_days=requested_days,
        status=RequestStatus.PENDING.value,
    )
    session.add(request)
    await session.flush()

    directory = get_user_directory()
    for mail in leader_mails(requester):
        leader = await directory.get_user_by_mail(mail)
        if leader is None:
            logger.warning("Leader %s of user %s not found in directory, skipping approval", mail, requester.id)
            continue
        await approval_service.create_record(session, request, leader.id)

    # 6. Audit and commit.
    response = await _finish(session, request, auth, AuditAction.SUBMIT, None)
    logger.info("Normal request %s submitted by %s for %g days", request.id, requester.id, requested_days)
    return RequestOutcome(request=response)


async def submit_occasional(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitOccasionalPayload,
) -> RequestOutcome:
    """Submit an occasional absence for the caller; it is accepted immediately.

    The end date is the last of ``duration_days`` working days starting at
    ``start_date``. Occasional requests neither block nor are blocked by
    other requests and never draw on the holiday pool.
    """
    requester = await _get_requester_or_404(auth.user_id)
    occasion = payload.occasion
    duration_days = occasion.duration_days or occasion.type.duration_days

    end_date = await get_working_date(session, payload.start_date, duration_days)
    _validate_period(payload.start_date, end_date, date.today())
    requested_days = await calculate_request_days(session, requester.id, payload.start_date, end_date)

    request = LeaveRequest(
        requester_id=requester.id,
        start_date=payload.start_date,
        end_date=end_date,
        type=RequestType.OCCASIONAL.value,
        occasional_type=occasion.type.value,
        occasional_duration_days=duration_days,
        occasional_info=occasion.info,
        requested_days=requested_days,
        status=RequestStatus.ACCEPTED.value,
    )
    session.add(request)
    await session.flush()

    events = [
        build_event(NotificationKind.OCCASIONAL_INFO, request, await admin_and_leader_recipients(request)),
        build_event(NotificationKind.OCCASIONAL_RESPONSE, request, await requester_recipients(request)),
    ]
    await ledger_service.insert_with_comment(session, request, occasion.info, requester.id)

    response = await _finish(session, request, auth, AuditAction.SUBMIT, None)
    logger.info("Occasional request %s (%s) registered for %s", request.id, occasion.type.value, requester.id)
    return RequestOutcome(request=response, events=events)


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------


async def accept(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestOutcome:
    """Accept every pending approval record of a request on the caller's authority.

    The request ends up ACCEPTED even when some record could not be accepted;
    ``success`` is False in that case.
    """
    request = await get_request_or_404(session, request_id)
    if request.status != RequestStatus.PENDING.value:
        raise AppError("Only pending requests can be accepted", status_code=400)

    before_dict = model_to_audit_dict(request)
    outbox: list[NotificationEvent] = []
    records = await list_records(session, request.id)

    success = True
    for record in records:
        if record.status != ApprovalStatus.PENDING.value:
            continue
        if not await approval_service.accept(session, record.id, auth.user_id, outbox):
            success = False

    if not records:
        await check_for_actions(session, request, outbox, actor_id=auth.user_id)

    if not success:
        logger.warning("Request %s accepted although some approvals could not be accepted", request.id)
    set_status(request, RequestStatus.ACCEPTED)

    response = await _finish(session, request, auth, AuditAction.ACCEPT, before_dict)
    return RequestOutcome(request=response, success=success, events=outbox)


async def reject(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestOutcome:
    """Reject every approval record of a request; the request ends up REJECTED."""
    request = await get_request_or_404(session, request_id)
    if request.status != RequestStatus.PENDING.value:
        raise AppError("Only pending requests can be rejected", status_code=400)

    before_dict = model_to_audit_dict(request)
    success = True
    for record in await list_records(session, request.id):
        if not await approval_service.reject(session, record.id, auth.user_id):
            success = False

    if not success:
        logger.warning("Request %s rejected although some approvals could not be rejected", request.id)
    set_status(request, RequestStatus.REJECTED)

    response = await _finish(session, request, auth, AuditAction.REJECT, before_dict)
    return RequestOutcome(request=response, success=success)


async def cancel(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestOutcome:
    """Cancel a pending or accepted request and give back what it took from the pool.

    The requester or an admin can cancel. A normal request only gets a
    reversal when it had been fully accepted (the deduction exists); an
    occasional request always gets its history entry reversed.
    """
    request = await get_request_or_404(session, request_id)
    if request.status not in _ACTIVE_STATUSES:
        raise AppError("Only pending or accepted requests can be cancelled", status_code=400)
    if auth.user_id != request.requester_id and not auth.is_admin:
        raise AppError("Not authorized to cancel this request", status_code=403)

    before_dict = model_to_audit_dict(request)
    was_accepted = request.status == RequestStatus.ACCEPTED.value

    records = await list_records(session, request.id)
    cancelling_after_accepting = all(r.decider_id is not None for r in records) if records else was_accepted
    if not records:
        records = [await approval_service.create_cancel_record(session, request)]

    success = True
    for record in records:
        if not await approval_service.reject(session, record.id, request.requester_id):
            success = False

    set_status(request, RequestStatus.CANCELLED)

    if success and request.type == RequestType.NORMAL.value and cancelling_after_accepting:
        await ledger_service.insert_reversed_with_comment(session, request, CANCEL_REASON, auth.user_id)
    elif success and request.type == RequestType.OCCASIONAL.value:
        await ledger_service.insert_reversed_with_comment(
            session, request, f"{CANCEL_REASON}: {request.occasional_info}", auth.user_id
        )
    elif not success:
        logger.warning("Request %s cancelled without pool reversal: some approvals could not be rejected", request.id)

    response = await _finish(session, request, auth, AuditAction.CANCEL, before_dict)
    logger.info("Request %s cancelled by %s", request.id, auth.user_id)
    return RequestOutcome(request=response, success=success)


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> RequestResponse:
    """Get a single request visible to the caller (own, addressed to them, or admin)."""
    request = await get_request_or_404(session, request_id)
    if not auth.is_admin and request.requester_id != auth.user_id:
        records = await list_records(session, request.id)
        if all(r.leader_id != auth.user_id for r in records):
            raise AppError("Not authorized to view this request", status_code=403)
    return _build_request_response(request)


async def list_requests(
    session: AsyncSession,
    requester_id: uuid.UUID | None = None,
    since: datetime | None = None,
) -> RequestListResponse:
    """List requests, newest first, optionally only the requester's.

    With ``since`` the list is empty unless at least one matching request was
    modified after that moment; then the full list is returned.
    """
    base_filters = []
    if requester_id is not None:
        base_filters.append(col(LeaveRequest.requester_id) == requester_id)

    if since is not None:
        count_result = await session.execute(
            select(func.count())
            .select_from(LeaveRequest)
            .where(*base_filters, col(LeaveRequest.modified_at) > since)
        )
        if count_result.scalar_one() == 0:
            return RequestListResponse(items=[], total=0)

    result = await session.execute(
        select(LeaveRequest).where(*base_filters).order_by(col(LeaveRequest.created_at).desc())
    )
    requests = list(result.scalars().all())

    return RequestListResponse(
        items=[_build_request_response(r) for r in requests],
        total=len(requests),
    )
