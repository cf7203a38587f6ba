"""Reconciliation of push events and confirmed deletes into the call list."""
from __future__ import annotations

import logging

from call_dashboard.domain.models import CallRecord
from call_dashboard.services.view_state import CallListState

logger = logging.getLogger(__name__)


class ReconciliationEngine:
    """Applies incremental changes to a :class:`CallListState`."""

    def __init__(self, state: CallListState) -> None:
        self._state = state

    def apply_create(self, record: CallRecord) -> bool:
        """Prepend ``record`` unless its id is already shown.

        The list is not truncated to the page size afterwards.
        """

        if self._state.contains(record.id):
            logger.debug("Call %s already in list, skipping", record.id)
            return False
        self._state.calls.insert(0, record)
        self._state.set_total(self._state.total + 1)
        logger.info("Added new call %s (total=%d, pages=%d)", record.id, self._state.total, self._state.pages)
        return True

    def apply_delete(self, call_id: str) -> None:
        """Drop a server-confirmed deletion from the list and the total.

        The total is decremented even when the call lives on another page.
        """

        self._state.calls = [call for call in self._state.calls if call.id != call_id]
        self._state.set_total(self._state.total - 1)
        logger.info("Removed call %s (total=%d, pages=%d)", call_id, self._state.total, self._state.pages)
