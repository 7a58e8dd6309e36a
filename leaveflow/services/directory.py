# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from leaveflow.schemas.user import UserResponse


class TeamInfo(BaseModel):
    """A team the user belongs to."""

    name: str
    leader_mail: str


class UserInfo(BaseModel):
    """User metadata from the company directory."""

    id: uuid.UUID
    mail: str
    name: str
    work_time: float = 8.0  # hours per working day
    admin: bool = False
    teams: list[TeamInfo] = Field(default_factory=list)


@runtime_checkable
class UserDirectory(Protocol):
    """Interface for the company user directory."""

    async def get_user(self, user_id: uuid.UUID) -> UserInfo | None:
        """Fetch a user by id. Returns None if not found."""
        ...

    async def get_user_by_mail(self, mail: str) -> UserInfo | None:
        """Fetch a user by mail (case-insensitive). Returns None if not found."""
        ...

    async def list_users(self) -> list[UserInfo]:
        """List all users."""
        ...


class InMemoryUserDirectory:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._users: dict[uuid.UUID, UserInfo] = {}

    def seed(self, user: UserInfo) -> None:
        """Seed or replace a user."""
        self._users[user.id] = user

    async def get_user(self, user_id: uuid.UUID) -> UserInfo | None:
        """Fetch a user by id. Returns None if not found."""
        return self._users.get(user_id)

    async def get_user_by_mail(self, mail: str) -> UserInfo | None:
        """Fetch a user by mail (case-insensitive). Returns None if not found."""
        wanted = mail.lower()
        for user in self._users.values():
            if user.mail.lower() == wanted:
                return user
        return None

    async def list_users(self) -> list[UserInfo]:
        """List all users."""
        return list(self._users.values())


def leader_mails(user: UserInfo) -> list[str]:
    """Distinct leader mails across the user's teams, in team order."""
    seen: dict[str, str] = {}
    for team in user.teams:
        seen.setdefault(team.leader_mail.lower(), team.leader_mail)
    return list(seen.values())


def to_user_response(user: UserInfo) -> UserResponse:
    return UserResponse(id=str(user.id), mail=user.mail, name=user.name)


_user_directory: UserDirectory = InMemoryUserDirectory()


def get_user_directory() -> UserDirectory:
    """FastAPI dependency for the user directory."""
    return _user_directory


def set_user_directory(directory: UserDirectory) -> None:
    """Override the directory (for testing or production wiring)."""
    global _user_directory
    _user_directory = directory
