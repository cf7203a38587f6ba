"""Call dashboard service coordinating queries, live updates and deletes."""
from __future__ import annotations

import logging
from typing import Optional

from call_dashboard.config import DELETE_ERROR_MESSAGE, DELETE_ERROR_TTL_SECONDS
from call_dashboard.domain.exceptions import CallsDashboardError, ServerError
from call_dashboard.domain.models import CallRecord, ChannelState, ViewSnapshot
from call_dashboard.ports.call_store import CallStorePort
from call_dashboard.ports.push import PushTransportPort
from call_dashboard.ports.scheduler import SchedulerPort, TimerHandle
from call_dashboard.services.live_updates import LiveUpdateChannel
from call_dashboard.services.query import QueryController
from call_dashboard.services.reconciliation import ReconciliationEngine
from call_dashboard.services.retry import RetryPolicy
from call_dashboard.services.view_state import CallListState

logger = logging.getLogger(__name__)


class CallDashboard:
    """Owns the call list state and every writer that touches it."""

    def __init__(
        self,
        store: CallStorePort,
        transport: PushTransportPort,
        scheduler: SchedulerPort,
        push_url: str,
        limit: int,
        retry_policy: Optional[RetryPolicy] = None,
        error_ttl: float = DELETE_ERROR_TTL_SECONDS,
    ) -> None:
        self._store = store
        self._scheduler = scheduler
        self._error_ttl = error_ttl
        self.state = CallListState(limit=limit)
        self.queries = QueryController(store, self.state)
        self.reconciliation = ReconciliationEngine(self.state)
        self.channel = LiveUpdateChannel(
            push_url,
            transport,
            scheduler,
            on_new_call=self._on_new_call,
            on_error=self._on_channel_error,
            on_open=self._on_channel_open,
            retry_policy=retry_policy,
        )
        self._error_timer: Optional[TimerHandle] = None
        self._channel_error: Optional[str] = None

    def snapshot(self) -> ViewSnapshot:
        return self.state.snapshot()

    @property
    def channel_state(self) -> ChannelState:
        return self.channel.state

    async def start(self) -> None:
        """Open the live channel and load the first page."""

        self.channel.start()
        await self.queries.fetch_page(1, self.state.search)

    async def stop(self) -> None:
        await self.channel.stop()
        self._cancel_error_timer()

    async def delete_call(self, call_id: str) -> bool:
        """Delete a call remotely, then drop it locally once confirmed."""

        try:
            await self._store.delete_call(call_id)
        except CallsDashboardError as exc:
            logger.warning("Deleting call %s failed: %s", call_id, exc)
            message = exc.details if isinstance(exc, ServerError) and exc.details else None
            self._show_transient_error(message or DELETE_ERROR_MESSAGE)
            return False
        self.reconciliation.apply_delete(call_id)
        return True

    def _on_new_call(self, record: CallRecord) -> None:
        self.reconciliation.apply_create(record)

    def _on_channel_error(self, message: str) -> None:
        self._channel_error = message
        self.state.error = message

    def _on_channel_open(self) -> None:
        if self._channel_error is not None and self.state.error == self._channel_error:
            self.state.error = None
        self._channel_error = None

    def _show_transient_error(self, message: str) -> None:
        self._cancel_error_timer()
        self.state.error = message

        def clear() -> None:
            self._error_timer = None
            if self.state.error == message:
                self.state.error = None

        self._error_timer = self._scheduler.call_later(self._error_ttl, clear)

    def _cancel_error_timer(self) -> None:
        timer, self._error_timer = self._error_timer, None
        if timer is not None:
            timer.cancel()
