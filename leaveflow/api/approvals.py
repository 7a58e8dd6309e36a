# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leaveflow.api.deps import AuthDep, NotifierDep
from leaveflow.db import SessionDep
from leaveflow.schemas.approval import ApprovalDecisionResponse, ApprovalListResponse
from leaveflow.services import approval as approval_service

approvals_router = APIRouter(prefix="/approvals", tags=["approvals"])


@approvals_router.get("", response_model=ApprovalListResponse)
async def list_my_approvals(
    session: SessionDep,
    auth: AuthDep,
) -> ApprovalListResponse:
    """Pending approvals addressed to the caller."""
    return await approval_service.list_pending_for_leader(session, auth.user_id)


@approvals_router.post("/{approval_id}/accept", response_model=ApprovalDecisionResponse)
async def accept_approval(
    approval_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    notifier: NotifierDep,
) -> ApprovalDecisionResponse:
    """Accept the approval addressed to the caller."""
    result = await approval_service.decide_record(session, auth, approval_id, accepted=True)
    if result.events:
        await notifier.publish(result.events)
    return result


@approvals_router.post("/{approval_id}/reject", response_model=ApprovalDecisionResponse)
async def reject_approval(
    approval_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ApprovalDecisionResponse:
    """Reject the approval addressed to the caller; this rejects the whole request."""
    return await approval_service.decide_record(session, auth, approval_id, accepted=False)
