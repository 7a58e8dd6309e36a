from __future__ import annotations

from pydantic import BaseModel, Field


class TeamPayload(BaseModel):
    """Team membership of a user, identified by the leader's mail."""

    name: str = Field(min_length=1, max_length=255)
    leader_mail: str = Field(min_length=1, max_length=255)


class UpsertUserRequest(BaseModel):
    """Request body for upserting a user in the directory."""

    mail: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=255)
    work_time: float = Field(default=8.0, gt=0, le=24)
    admin: bool = False
    teams: list[TeamPayload] = Field(default_factory=list)


class UserResponse(BaseModel):
    """Public projection of a user; the id is serialized as a string."""

    id: str
    mail: str
    name: str


class UserListResponse(BaseModel):
    """List of users."""

    items: list[UserResponse]
    total: int
