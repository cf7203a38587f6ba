"""Paged and searchable queries against the remote call store."""
from __future__ import annotations

import logging
from typing import List

from call_dashboard.config import FETCH_ERROR_MESSAGE
from call_dashboard.domain.exceptions import CallsDashboardError
from call_dashboard.domain.models import CallPage, CallRecord
from call_dashboard.ports.call_store import CallStorePort
from call_dashboard.services.view_state import CallListState

logger = logging.getLogger(__name__)


def _unique_calls(calls: List[CallRecord]) -> List[CallRecord]:
    seen: set[str] = set()
    unique: List[CallRecord] = []
    for call in calls:
        if call.id in seen:
            logger.warning("Dropping duplicate call %s from page response", call.id)
            continue
        seen.add(call.id)
        unique.append(call)
    return unique


class QueryController:
    """Issues page/search requests and applies only the latest response.

    Every request gets a sequence number. When a response (or failure) comes
    back, it is applied only if no newer request was issued in the meantime.
    """

    def __init__(self, store: CallStorePort, state: CallListState) -> None:
        self._store = store
        self._state = state
        self._issued = 0

    @property
    def latest_sequence(self) -> int:
        return self._issued

    async def fetch_page(self, page: int, search: str = "") -> bool:
        """Fetch ``page`` for ``search``; return whether the result was applied."""

        self._issued += 1
        sequence = self._issued
        logger.debug("Fetching page %d search=%r (seq=%d)", page, search, sequence)
        try:
            result = await self._store.fetch_page(page, self._state.limit, search)
        except CallsDashboardError as exc:
            if sequence != self._issued:
                logger.debug("Discarding stale failure for seq=%d: %s", sequence, exc)
                return False
            logger.warning("Fetching page %d failed: %s", page, exc)
            self._state.error = str(exc) or FETCH_ERROR_MESSAGE
            self._state.loading = False
            return True

        if sequence != self._issued:
            logger.debug("Discarding stale response for seq=%d (latest=%d)", sequence, self._issued)
            return False
        self._apply(result, search)
        return True

    async def set_search(self, term: str) -> bool:
        """Change the search term and reload from the first page."""

        self._state.search = term
        self._state.current_page = 1
        return await self.fetch_page(1, term)

    async def set_page(self, page: int) -> bool:
        """Move to ``page`` within the known range and load it."""

        target = self._state.set_page(page)
        return await self.fetch_page(target, self._state.search)

    async def refresh(self) -> bool:
        return await self.fetch_page(self._state.current_page, self._state.search)

    def _apply(self, result: CallPage, search: str) -> None:
        self._state.search = search
        self._state.calls = _unique_calls(list(result.calls))
        self._state.current_page = result.current_page
        self._state.set_total(result.total)
        self._state.error = None
        self._state.loading = False
