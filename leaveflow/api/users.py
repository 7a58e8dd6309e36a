# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leaveflow.api.deps import AdminDep, AuthDep
from leaveflow.exceptions import AppError
from leaveflow.schemas.user import UpsertUserRequest, UserListResponse, UserResponse
from leaveflow.services.directory import (
    InMemoryUserDirectory,
    TeamInfo,
    UserInfo,
    get_user_directory,
    to_user_response,
)

users_router = APIRouter(prefix="/users", tags=["users"])


@users_router.put(
    "/{user_id}",
    response_model=UserResponse,
)
async def upsert_user(
    user_id: uuid.UUID,
    payload: UpsertUserRequest,
    auth: AdminDep,
) -> UserResponse:
    """Create or update a user in the in-memory directory (admin only)."""
    directory = get_user_directory()
    if not isinstance(directory, InMemoryUserDirectory):
        raise AppError("The configured user directory is read-only", status_code=409)
    user = UserInfo(
        id=user_id,
        mail=payload.mail,
        name=payload.name,
        work_time=payload.work_time,
        admin=payload.admin,
        teams=[TeamInfo(name=t.name, leader_mail=t.leader_mail) for t in payload.teams],
    )
    directory.seed(user)
    return to_user_response(user)


@users_router.get(
    "/{user_id}",
    response_model=UserResponse,
)
async def get_user(
    user_id: uuid.UUID,
    auth: AuthDep,
) -> UserResponse:
    """Get a user from the directory."""
    user = await get_user_directory().get_user(user_id)
    if user is None:
        raise AppError("User not found", status_code=404)
    return to_user_response(user)


@users_router.get(
    "",
    response_model=UserListResponse,
)
async def list_users(
    auth: AuthDep,
) -> UserListResponse:
    """List all users in the directory."""
    users = await get_user_directory().list_users()
    items = [to_user_response(u) for u in users]
    return UserListResponse(items=items, total=len(items))
