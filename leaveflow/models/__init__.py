from sqlmodel import SQLModel

from leaveflow.models.approval import ApprovalRecord
from leaveflow.models.audit import AuditLog
from leaveflow.models.base import ModifiedMixin, TimestampMixin, UUIDBase
from leaveflow.models.enums import (
    ApprovalStatus,
    AuditAction,
    AuditEntityType,
    LedgerEntryType,
    NotificationKind,
    OccasionalType,
    RequestStatus,
    RequestType,
)
from leaveflow.models.holiday import Holiday
from leaveflow.models.ledger import LedgerEntry
from leaveflow.models.request import LeaveRequest

__all__ = [
    "ApprovalRecord",
    "ApprovalStatus",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "Holiday",
    "LeaveRequest",
    "LedgerEntry",
    "LedgerEntryType",
    "ModifiedMixin",
    "NotificationKind",
    "OccasionalType",
    "RequestStatus",
    "RequestType",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
