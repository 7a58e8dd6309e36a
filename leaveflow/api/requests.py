# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Query, status

from leaveflow.api.deps import AdminDep, AuthDep, NotifierDep
from leaveflow.db import SessionDep
from leaveflow.schemas.approval import ApprovalListResponse
from leaveflow.schemas.request import (
    RequestActionResponse,
    RequestListResponse,
    RequestResponse,
    SubmitNormalPayload,
    SubmitOccasionalPayload,
)
from leaveflow.services import approval as approval_service
from leaveflow.services import request as request_service

requests_router = APIRouter(prefix="/requests", tags=["requests"])


async def _respond(outcome: request_service.RequestOutcome, notifier: NotifierDep) -> RequestActionResponse:
    """Dispatch the outcome's notifications after the unit of work has committed."""
    if outcome.events:
        await notifier.publish(outcome.events)
    return RequestActionResponse(request=outcome.request, success=outcome.success, events=outcome.events)


@requests_router.post("/normal", response_model=RequestActionResponse, status_code=status.HTTP_201_CREATED)
async def submit_normal(
    payload: SubmitNormalPayload,
    session: SessionDep,
    auth: AuthDep,
    notifier: NotifierDep,
) -> RequestActionResponse:
    """Submit a vacation request awaiting leader approval."""
    return await _respond(await request_service.submit_normal(session, auth, payload), notifier)


@requests_router.post("/occasional", response_model=RequestActionResponse, status_code=status.HTTP_201_CREATED)
async def submit_occasional(
    payload: SubmitOccasionalPayload,
    session: SessionDep,
    auth: AuthDep,
    notifier: NotifierDep,
) -> RequestActionResponse:
    """Register an occasional absence; it is accepted immediately."""
    return await _respond(await request_service.submit_occasional(session, auth, payload), notifier)


@requests_router.get("", response_model=RequestListResponse)
async def list_requests(
    session: SessionDep,
    auth: AuthDep,
    since: datetime | None = Query(default=None),
) -> RequestListResponse:
    """List all requests (admin) or the caller's own requests.

    With ``since`` the list is empty unless something changed after that moment.
    """
    requester_id = None if auth.is_admin else auth.user_id
    return await request_service.list_requests(session, requester_id, since)


@requests_router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Get a single leave request."""
    return await request_service.get_request(session, auth, request_id)


@requests_router.get("/{request_id}/approvals", response_model=ApprovalListResponse)
async def list_request_approvals(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> ApprovalListResponse:
    """List the approval records of a request."""
    await request_service.get_request(session, auth, request_id)
    return await approval_service.list_request_approvals(session, request_id)


@requests_router.post("/{request_id}/accept", response_model=RequestActionResponse)
async def accept_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    notifier: NotifierDep,
) -> RequestActionResponse:
    """Accept a pending request on behalf of all its approvers (admin only)."""
    return await _respond(await request_service.accept(session, auth, request_id), notifier)


@requests_router.post("/{request_id}/reject", response_model=RequestActionResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    notifier: NotifierDep,
) -> RequestActionResponse:
    """Reject a pending request (admin only)."""
    return await _respond(await request_service.reject(session, auth, request_id), notifier)


@requests_router.post("/{request_id}/cancel", response_model=RequestActionResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    notifier: NotifierDep,
) -> RequestActionResponse:
    """Cancel a pending or accepted request (requester or admin)."""
    return await _respond(await request_service.cancel(session, auth, request_id), notifier)
