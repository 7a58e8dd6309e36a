"""Unit tests for request payload schemas."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from leaveflow.models.enums import OccasionalType
from leaveflow.schemas.ledger import CreateAdjustmentRequest
from leaveflow.schemas.request import OccasionInfo, SubmitNormalPayload, SubmitOccasionalPayload
from leaveflow.schemas.user import UpsertUserRequest

# ---------------------------------------------------------------------------
# OccasionInfo
# ---------------------------------------------------------------------------


def test_occasion_info_applies_type_defaults() -> None:
    info = OccasionInfo(type=OccasionalType.OWN_WEDDING)
    assert info.duration_days == 2
    assert info.info == OccasionalType.OWN_WEDDING.description


def test_occasion_info_keeps_explicit_values() -> None:
    info = OccasionInfo(type=OccasionalType.FAMILY_DEATH, duration_days=3, info="Grandfather")
    assert info.duration_days == 3
    assert info.info == "Grandfather"


def test_occasion_info_empty_info_gets_default() -> None:
    info = OccasionInfo(type=OccasionalType.CHILD_BIRTH, info="")
    assert info.info == OccasionalType.CHILD_BIRTH.description


@pytest.mark.parametrize("duration", [0, -1, 31])
def test_occasion_info_rejects_bad_duration(duration: int) -> None:
    with pytest.raises(ValidationError):
        OccasionInfo(type=OccasionalType.CHILD_BIRTH, duration_days=duration)


def test_occasion_info_rejects_unknown_type() -> None:
    with pytest.raises(ValidationError):
        OccasionInfo.model_validate({"type": "SABBATICAL"})


# ---------------------------------------------------------------------------
# Submission payloads
# ---------------------------------------------------------------------------


def test_submit_normal_payload_parses_dates() -> None:
    payload = SubmitNormalPayload.model_validate({"start_date": "2026-07-01", "end_date": "2026-07-03"})
    assert payload.start_date == date(2026, 7, 1)
    assert payload.end_date == date(2026, 7, 3)


def test_submit_normal_payload_requires_end_date() -> None:
    with pytest.raises(ValidationError):
        SubmitNormalPayload.model_validate({"start_date": "2026-07-01"})


def test_submit_occasional_payload_nested() -> None:
    payload = SubmitOccasionalPayload.model_validate(
        {"start_date": "2026-07-01", "occasion": {"type": "CHILD_WEDDING"}}
    )
    assert payload.occasion.type == OccasionalType.CHILD_WEDDING
    assert payload.occasion.duration_days == 1


# ---------------------------------------------------------------------------
# Admin payloads
# ---------------------------------------------------------------------------


def test_adjustment_requires_reason() -> None:
    with pytest.raises(ValidationError):
        CreateAdjustmentRequest.model_validate(
            {"user_id": "8f14e45f-ceea-467f-a0e6-1c3a2d5b7e90", "amount_days": 5, "reason": ""}
        )


def test_upsert_user_defaults() -> None:
    payload = UpsertUserRequest(mail="jane@example.com", name="Jane")
    assert payload.work_time == 8.0
    assert payload.admin is False
    assert payload.teams == []
