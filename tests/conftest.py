from __future__ import annotations

import os

# Tests run against in-memory SQLite unless DATABASE_URL points elsewhere.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from typing import TYPE_CHECKING  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402

from leaveflow.config import get_settings  # noqa: E402
from leaveflow.db import engine_options, get_session  # noqa: E402
from leaveflow.main import app  # noqa: E402
from leaveflow.models import SQLModel  # noqa: E402
from leaveflow.services.directory import InMemoryUserDirectory, set_user_directory  # noqa: E402
from leaveflow.services.notification import (  # noqa: E402
    InMemoryNotificationService,
    LoggingNotificationService,
    set_notification_service,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """Create an engine with a fresh schema for every test."""
    database_url = get_settings().database_url
    _engine = create_async_engine(database_url, **engine_options(database_url))
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield the session shared by the test body and the application."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def directory() -> Iterator[InMemoryUserDirectory]:
    """A fresh, empty user directory for every test."""
    svc = InMemoryUserDirectory()
    set_user_directory(svc)
    yield svc
    set_user_directory(InMemoryUserDirectory())


@pytest.fixture(autouse=True)
def notifier() -> Iterator[InMemoryNotificationService]:
    """Capture published notifications for every test."""
    svc = InMemoryNotificationService()
    set_notification_service(svc)
    yield svc
    set_notification_service(LoggingNotificationService())
