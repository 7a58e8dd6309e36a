from __future__ import annotations

import enum


class RequestType(enum.StrEnum):
    """Kind of leave request."""

    NORMAL = "NORMAL"
    OCCASIONAL = "OCCASIONAL"


class RequestStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class ApprovalStatus(enum.StrEnum):
    """Decision recorded on a single approval record."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class OccasionalType(enum.StrEnum):
    """Statutory special-circumstance absences.

    Each type carries its default length in working days and a description
    used as the free-text info when the requester gives none.
    """

    OWN_WEDDING = "OWN_WEDDING"
    CHILD_WEDDING = "CHILD_WEDDING"
    CHILD_BIRTH = "CHILD_BIRTH"
    CLOSE_FAMILY_DEATH = "CLOSE_FAMILY_DEATH"
    FAMILY_DEATH = "FAMILY_DEATH"

    @property
    def duration_days(self) -> int:
        return _OCCASIONAL_DAYS[self]

    @property
    def description(self) -> str:
        return _OCCASIONAL_DESCRIPTIONS[self]


_OCCASIONAL_DAYS = {
    OccasionalType.OWN_WEDDING: 2,
    OccasionalType.CHILD_WEDDING: 1,
    OccasionalType.CHILD_BIRTH: 2,
    OccasionalType.CLOSE_FAMILY_DEATH: 2,
    OccasionalType.FAMILY_DEATH: 1,
}

_OCCASIONAL_DESCRIPTIONS = {
    OccasionalType.OWN_WEDDING: "Own wedding",
    OccasionalType.CHILD_WEDDING: "Child's wedding",
    OccasionalType.CHILD_BIRTH: "Birth of a child",
    OccasionalType.CLOSE_FAMILY_DEATH: "Death of a spouse, child or parent",
    OccasionalType.FAMILY_DEATH: "Death of a sibling, grandparent or in-law",
}


class LedgerEntryType(enum.StrEnum):
    """Type of holiday ledger entry."""

    ADJUSTMENT = "ADJUSTMENT"
    USAGE = "USAGE"
    REVERSAL = "REVERSAL"
    OCCASIONAL = "OCCASIONAL"
    OCCASIONAL_REVERSAL = "OCCASIONAL_REVERSAL"


class NotificationKind(enum.StrEnum):
    """Outbound events produced by the request lifecycle."""

    OCCASIONAL_INFO = "OCCASIONAL_INFO"
    OCCASIONAL_RESPONSE = "OCCASIONAL_RESPONSE"
    REQUEST_ACCEPTED = "REQUEST_ACCEPTED"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    REQUEST = "REQUEST"
    APPROVAL = "APPROVAL"
    HOLIDAY = "HOLIDAY"
    ADJUSTMENT = "ADJUSTMENT"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    DELETE = "DELETE"
    SUBMIT = "SUBMIT"
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
