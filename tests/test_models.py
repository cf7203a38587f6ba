from __future__ import annotations

import pytest
from pydantic import ValidationError

from call_dashboard.domain.models import CallRecord, PaginationMeta, Speaker, page_count

from conftest import call_payload


@pytest.mark.parametrize(
    ("total", "limit", "expected"),
    [(0, 10, 1), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3), (-3, 10, 1)],
)
def test_page_count_has_floor_of_one(total: int, limit: int, expected: int) -> None:
    assert page_count(total, limit) == expected


def test_pagination_derive_clamps_current_page() -> None:
    meta = PaginationMeta.derive(total=25, limit=10, current_page=7)

    assert meta.pages == 3
    assert meta.current_page == 3
    assert PaginationMeta.derive(total=-1, limit=10, current_page=0).model_dump(by_alias=True) == {
        "total": 0,
        "limit": 10,
        "currentPage": 1,
        "pages": 1,
    }


def test_call_record_parses_wire_names() -> None:
    record = CallRecord.model_validate(call_payload("c1", recordingType="redacted", extra_field="ignored"))

    assert record.caller == "Alice"
    assert record.callee == "Clinic"
    assert record.recording_url.endswith("c1.mp3")
    assert record.recording_type == "redacted"
    assert [u.speaker for u in record.transcript] == [Speaker.CUSTOMER, Speaker.ASSISTANT]
    assert record.model_dump(by_alias=True)["from"] == "Alice"


def test_call_record_is_immutable() -> None:
    record = CallRecord.model_validate(call_payload("c1"))

    with pytest.raises(ValidationError):
        record.duration = "9:99"  # type: ignore[misc]


def test_call_record_rejects_unknown_speaker() -> None:
    payload = call_payload("c1", transcript=[{"speaker": "robot", "text": "beep"}])

    with pytest.raises(ValidationError):
        CallRecord.model_validate(payload)
