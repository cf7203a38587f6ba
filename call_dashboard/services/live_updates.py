"""Live update channel with reconnect state machine."""
from __future__ import annotations

import asyncio
import json
import logging
from contextlib import suppress
from typing import Any, Callable, Optional

from pydantic import ValidationError

from call_dashboard.config import CHANNEL_ERROR_MESSAGE
from call_dashboard.domain.exceptions import CallsDashboardError, ProtocolError
from call_dashboard.domain.models import CallRecord, ChannelState
from call_dashboard.ports.push import PushConnection, PushTransportPort
from call_dashboard.ports.scheduler import SchedulerPort, TimerHandle
from call_dashboard.services.retry import FixedDelay, RetryPolicy

logger = logging.getLogger(__name__)

NEW_CALL = "new_call"


def decode_frame(raw: str | bytes) -> Optional[CallRecord]:
    """Return the call carried by a ``new_call`` frame.

    Returns ``None`` for well-formed frames of other types and raises
    :class:`ProtocolError` for anything malformed.
    """

    try:
        data: Any = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise ProtocolError(f"Frame is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ProtocolError("Frame is not a JSON object")
    message_type = data.get("type")
    if not isinstance(message_type, str):
        raise ProtocolError("Frame has no 'type'")
    if message_type != NEW_CALL:
        logger.info("Ignoring push message of type %r", message_type)
        return None
    payload = data.get("call", data.get("payload"))
    if not isinstance(payload, dict):
        raise ProtocolError("new_call frame has no call payload")
    try:
        return CallRecord.model_validate(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Invalid call payload: {exc}") from exc


class LiveUpdateChannel:
    """Owns one push connection and keeps it alive.

    States: ``STOPPED -> CONNECTING -> OPEN -> RETRY_WAIT -> CONNECTING ...``.
    At most one retry timer is pending at any time, and ``stop`` releases both
    the connection and the timer.
    """

    def __init__(
        self,
        url: str,
        transport: PushTransportPort,
        scheduler: SchedulerPort,
        on_new_call: Callable[[CallRecord], Any],
        on_error: Optional[Callable[[str], None]] = None,
        on_open: Optional[Callable[[], None]] = None,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> None:
        self._url = url
        self._transport = transport
        self._scheduler = scheduler
        self._on_new_call = on_new_call
        self._on_error = on_error
        self._on_open = on_open
        self._retry_policy = retry_policy or FixedDelay()
        self._state = ChannelState.STOPPED
        self._connection: Optional[PushConnection] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._retry_timer: Optional[TimerHandle] = None

    @property
    def state(self) -> ChannelState:
        return self._state

    @property
    def url(self) -> str:
        return self._url

    @property
    def retry_pending(self) -> bool:
        return self._retry_timer is not None

    def start(self) -> None:
        """Begin connecting. Must be called from the owning event loop."""

        if self._state is not ChannelState.STOPPED:
            return
        self._connect()

    async def stop(self) -> None:
        """Close the connection and cancel any pending reconnect."""

        if self._state is ChannelState.STOPPED:
            return
        self._state = ChannelState.STOPPED
        self._cancel_retry_timer()
        connection, self._connection = self._connection, None
        task, self._task = self._task, None
        if connection is not None:
            await connection.close()
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
        logger.info("Live update channel stopped")

    def handle_open(self) -> None:
        if self._state is not ChannelState.CONNECTING:
            return
        self._state = ChannelState.OPEN
        self._cancel_retry_timer()
        self._retry_policy.reset()
        logger.info("Live update channel connected to %s", self._url)
        if self._on_open is not None:
            self._on_open()

    def handle_close(self, reason: Optional[BaseException] = None) -> None:
        if self._state in (ChannelState.STOPPED, ChannelState.RETRY_WAIT) or self._retry_timer is not None:
            logger.debug("Ignoring close event in state %s: %s", self._state.value, reason)
            return
        self._state = ChannelState.RETRY_WAIT
        delay = self._retry_policy.next_delay()
        logger.warning("Live update channel closed (%s), reconnecting in %.1fs", reason, delay)
        self._retry_timer = self._scheduler.call_later(delay, self._on_retry_timer)
        if self._on_error is not None:
            self._on_error(CHANNEL_ERROR_MESSAGE)

    def handle_frame(self, raw: str | bytes) -> None:
        try:
            record = decode_frame(raw)
        except ProtocolError as exc:
            logger.warning("Ignoring malformed push frame: %s", exc)
            return
        if record is not None:
            self._on_new_call(record)

    def _connect(self) -> None:
        self._state = ChannelState.CONNECTING
        logger.info("Connecting to push server %s", self._url)
        self._task = asyncio.get_running_loop().create_task(self._run())

    def _on_retry_timer(self) -> None:
        self._retry_timer = None
        if self._state is ChannelState.RETRY_WAIT:
            self._connect()

    def _cancel_retry_timer(self) -> None:
        timer, self._retry_timer = self._retry_timer, None
        if timer is not None:
            timer.cancel()

    async def _run(self) -> None:
        try:
            connection = await self._transport.connect(self._url)
        except CallsDashboardError as exc:
            self.handle_close(exc)
            return
        except Exception as exc:
            logger.exception("Unexpected error connecting to %s", self._url)
            self.handle_close(exc)
            return
        if self._state is not ChannelState.CONNECTING:
            await connection.close()
            return
        self._connection = connection
        try:
            self.handle_open()
            while True:
                self.handle_frame(await connection.recv())
        except CallsDashboardError as exc:
            if self._connection is connection:
                self._connection = None
            self.handle_close(exc)
        except Exception as exc:
            logger.exception("Unexpected error on push connection %s", self._url)
            if self._connection is connection:
                self._connection = None
            try:
                await connection.close()
            except Exception as close_exc:
                logger.warning("Closing broken push connection failed: %s", close_exc)
            self.handle_close(exc)
