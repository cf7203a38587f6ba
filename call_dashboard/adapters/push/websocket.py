"""WebSocket push transport."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from call_dashboard.domain.exceptions import ChannelClosed, NetworkError
from call_dashboard.ports.push import PushConnection, PushTransportPort

logger = logging.getLogger(__name__)


class WebSocketConnection(PushConnection):
    """Receive-only wrapper around a ``websockets`` client connection."""

    def __init__(self, socket: Any) -> None:
        self._socket = socket

    async def recv(self) -> str:
        try:
            frame = await self._socket.recv()
        except ConnectionClosed as exc:
            raise ChannelClosed(f"Push connection closed (code={exc.rcvd.code if exc.rcvd else None})") from exc
        except WebSocketException as exc:
            raise ChannelClosed(f"Push connection failed: {exc}") from exc
        if isinstance(frame, bytes):
            return frame.decode("utf-8", errors="replace")
        return frame

    async def close(self) -> None:
        await self._socket.close()


class WebSocketTransport(PushTransportPort):
    """Opens push connections with the ``websockets`` client."""

    def __init__(self, open_timeout: Optional[float] = 10.0) -> None:
        self._open_timeout = open_timeout

    async def connect(self, url: str) -> PushConnection:
        try:
            socket = await websockets.connect(url, open_timeout=self._open_timeout)
        except (WebSocketException, OSError, asyncio.TimeoutError) as exc:
            raise NetworkError(f"Failed to connect to {url}: {exc}") from exc
        logger.info("Connected to push server %s", url)
        return WebSocketConnection(socket)
