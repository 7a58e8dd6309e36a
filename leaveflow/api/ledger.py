# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from leaveflow.api.deps import AdminDep, AuthDep
from leaveflow.db import SessionDep
from leaveflow.exceptions import AppError
from leaveflow.schemas.auth import AuthContext
from leaveflow.schemas.ledger import (
    BalanceResponse,
    CreateAdjustmentRequest,
    LedgerEntryResponse,
    LedgerListResponse,
)
from leaveflow.services import ledger as ledger_service

user_ledger_router = APIRouter(prefix="/users/{user_id}", tags=["ledger"])

adjustment_router = APIRouter(prefix="/adjustments", tags=["ledger"])


def _ensure_self_or_admin(auth: AuthContext, user_id: uuid.UUID) -> None:
    if auth.user_id != user_id and not auth.is_admin:
        raise AppError("Not authorized to view another user's pool", status_code=status.HTTP_403_FORBIDDEN)


@user_ledger_router.get("/balance", response_model=BalanceResponse)
async def get_balance(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    as_of: date | None = Query(default=None),
) -> BalanceResponse:
    """Remaining holiday pool of a user."""
    _ensure_self_or_admin(auth, user_id)
    return await ledger_service.get_balance(session, user_id, as_of)


@user_ledger_router.get("/history", response_model=LedgerListResponse)
async def get_history(
    user_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LedgerListResponse:
    """Paginated holiday history of a user."""
    _ensure_self_or_admin(auth, user_id)
    return await ledger_service.get_history(session, user_id, offset, limit)


@adjustment_router.post("", response_model=LedgerEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_adjustment(
    payload: CreateAdjustmentRequest,
    session: SessionDep,
    auth: AdminDep,
) -> LedgerEntryResponse:
    """Grant or correct a user's holiday pool (admin only)."""
    return await ledger_service.create_adjustment(session, auth, payload)
