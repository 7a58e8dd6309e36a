from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from leaveflow.schemas.notification import NotificationEvent

logger = logging.getLogger(__name__)


@runtime_checkable
class NotificationService(Protocol):
    """Outbound port for lifecycle events (mailer, chat bot, ...)."""

    async def publish(self, events: Sequence[NotificationEvent]) -> None:
        """Deliver events. Delivery is fire-and-forget."""
        ...


class LoggingNotificationService:
    """Default port: writes every event to the log."""

    async def publish(self, events: Sequence[NotificationEvent]) -> None:
        for event in events:
            logger.info(
                "Notification %s for request=%s requester=%s recipients=%s",
                event.kind.value,
                event.request_id,
                event.requester_id,
                ",".join(event.recipients) or "-",
            )


class InMemoryNotificationService:
    """Collects published events; used by tests and local tooling."""

    def __init__(self) -> None:
        self.events: list[NotificationEvent] = []

    async def publish(self, events: Sequence[NotificationEvent]) -> None:
        self.events.extend(events)


_notification_service: NotificationService = LoggingNotificationService()


def get_notification_service() -> NotificationService:
    """FastAPI dependency for the notification port."""
    return _notification_service


def set_notification_service(service: NotificationService) -> None:
    """Override the port (for testing or production wiring)."""
    global _notification_service
    _notification_service = service
