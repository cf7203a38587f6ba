"""Materialized call list shared by the query and reconciliation paths."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from call_dashboard.config import DEFAULT_PAGE_LIMIT, EMPTY_LIST_MESSAGE, EMPTY_SEARCH_MESSAGE
from call_dashboard.domain.models import CallRecord, PaginationMeta, ViewSnapshot, page_count


@dataclass
class CallListState:
    """Mutable view state owned by the event loop.

    ``pages`` is never stored: it is derived from ``total`` and ``limit`` on
    every read, and ``current_page`` is clamped whenever ``total`` changes.
    """

    limit: int = DEFAULT_PAGE_LIMIT
    calls: List[CallRecord] = field(default_factory=list)
    total: int = 0
    current_page: int = 1
    search: str = ""
    error: Optional[str] = None
    loading: bool = True

    def __post_init__(self) -> None:
        if self.limit < 1:
            raise ValueError("limit must be positive")

    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)

    @property
    def pagination(self) -> PaginationMeta:
        return PaginationMeta.derive(self.total, self.limit, self.current_page)

    def set_total(self, total: int) -> None:
        self.total = max(total, 0)
        self.current_page = min(max(self.current_page, 1), self.pages)

    def set_page(self, page: int) -> int:
        """Move to ``page`` clamped into range and return the page used."""
        self.current_page = min(max(page, 1), self.pages)
        return self.current_page

    def contains(self, call_id: str) -> bool:
        return any(call.id == call_id for call in self.calls)

    def snapshot(self) -> ViewSnapshot:
        empty_message = None
        if not self.calls and not self.loading:
            empty_message = EMPTY_SEARCH_MESSAGE if self.search else EMPTY_LIST_MESSAGE
        return ViewSnapshot(
            calls=tuple(self.calls),
            pagination=self.pagination,
            search=self.search,
            error=self.error,
            loading=self.loading,
            empty_message=empty_message,
        )
