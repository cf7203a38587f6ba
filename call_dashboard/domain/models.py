"""Domain models for the call dashboard."""
from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Speaker(str, Enum):
    """Role of the party speaking in a transcript line."""

    CUSTOMER = "customer"
    ASSISTANT = "assistant"


class Utterance(BaseModel):
    """A single transcript line."""

    model_config = ConfigDict(frozen=True)

    speaker: Speaker
    text: str


class CallRecord(BaseModel):
    """A recorded call as delivered by the REST endpoint or the push channel."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Opaque unique identifier of the call.")
    caller: str = Field(..., alias="from", description="Caller display name.")
    callee: str = Field(..., alias="to", description="Callee display name.")
    from_number: str = Field(..., description="Caller phone number.")
    to_number: str = Field(..., description="Callee phone number.")
    duration: str = Field(..., description="Formatted call duration.")
    recording_url: str = Field(..., alias="recordingUrl", description="Raw recording locator.")
    pii_url: str = Field(..., alias="piiUrl", description="Redacted recording locator.")
    created_at: datetime = Field(..., alias="createdAt")
    transcript: Tuple[Utterance, ...] = ()
    recording_type: Optional[Literal["regular", "redacted"]] = Field(default=None, alias="recordingType")
    transcript_sid: Optional[str] = None


def page_count(total: int, limit: int) -> int:
    """Return ``ceil(total / limit)`` with a floor of one page."""

    return max(1, math.ceil(max(total, 0) / limit))


class PaginationMeta(BaseModel):
    """Pagination metadata derived from the authoritative total."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total: int = Field(default=0, ge=0)
    limit: int = Field(default=10, ge=1)
    current_page: int = Field(default=1, ge=1, alias="currentPage")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)

    @classmethod
    def derive(cls, total: int, limit: int, current_page: int = 1) -> "PaginationMeta":
        """Build metadata with ``total`` floored at 0 and the page clamped into range."""

        total = max(total, 0)
        pages = page_count(total, limit)
        return cls(total=total, limit=limit, current_page=min(max(current_page, 1), pages))


class CallPage(BaseModel):
    """One page of calls returned by the remote store."""

    calls: list[CallRecord] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    current_page: int = Field(default=1, alias="currentPage")

    model_config = ConfigDict(populate_by_name=True)


class ChannelState(str, Enum):
    """Lifecycle states of the live update channel."""

    STOPPED = "stopped"
    CONNECTING = "connecting"
    OPEN = "open"
    RETRY_WAIT = "retry_wait"


class ViewSnapshot(BaseModel):
    """Read-only view of the call list handed to presentation code."""

    model_config = ConfigDict(frozen=True)

    calls: Tuple[CallRecord, ...] = ()
    pagination: PaginationMeta = Field(default_factory=PaginationMeta)
    search: str = ""
    error: Optional[str] = None
    loading: bool = False
    empty_message: Optional[str] = None
