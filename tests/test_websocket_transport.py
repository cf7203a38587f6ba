from __future__ import annotations

from typing import Any

import pytest
from websockets.exceptions import ConnectionClosed, InvalidProxy, WebSocketException
from websockets.frames import Close

from call_dashboard.adapters.push import websocket as websocket_module
from call_dashboard.adapters.push.websocket import WebSocketTransport
from call_dashboard.domain.exceptions import ChannelClosed, NetworkError

pytestmark = pytest.mark.asyncio


class FakeSocket:
    def __init__(self, frames: list[Any]) -> None:
        self._frames = frames
        self.closed = False

    async def recv(self) -> Any:
        if not self._frames:
            raise ConnectionClosed(None, None)
        frame = self._frames.pop(0)
        if isinstance(frame, BaseException):
            raise frame
        return frame

    async def close(self) -> None:
        self.closed = True


async def test_connect_wraps_socket(monkeypatch: pytest.MonkeyPatch) -> None:
    socket = FakeSocket(['{"type": "new_call"}', b'{"type": "x"}'])
    seen: dict[str, Any] = {}

    async def fake_connect(url: str, **kwargs: Any) -> FakeSocket:
        seen["url"] = url
        seen.update(kwargs)
        return socket

    monkeypatch.setattr(websocket_module.websockets, "connect", fake_connect)

    connection = await WebSocketTransport(open_timeout=3.0).connect("ws://push/ws")

    assert seen == {"url": "ws://push/ws", "open_timeout": 3.0}
    assert await connection.recv() == '{"type": "new_call"}'
    assert await connection.recv() == '{"type": "x"}'
    with pytest.raises(ChannelClosed):
        await connection.recv()
    await connection.close()
    assert socket.closed is True


async def test_connect_failure_becomes_network_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def refuse(url: str, **kwargs: Any) -> FakeSocket:
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(websocket_module.websockets, "connect", refuse)

    with pytest.raises(NetworkError, match="ws://push/ws"):
        await WebSocketTransport().connect("ws://push/ws")


async def _connected(monkeypatch: pytest.MonkeyPatch, socket: FakeSocket):
    async def fake_connect(url: str, **kwargs: Any) -> FakeSocket:
        return socket

    monkeypatch.setattr(websocket_module.websockets, "connect", fake_connect)
    return await WebSocketTransport().connect("ws://push/ws")


async def test_invalid_utf8_bytes_are_replaced(monkeypatch: pytest.MonkeyPatch) -> None:
    connection = await _connected(monkeypatch, FakeSocket([b'{"type": "\xff"}']))

    assert await connection.recv() == '{"type": "�"}'


async def test_close_code_is_reported(monkeypatch: pytest.MonkeyPatch) -> None:
    connection = await _connected(monkeypatch, FakeSocket([ConnectionClosed(Close(1011, "boom"), None)]))

    with pytest.raises(ChannelClosed, match="code=1011"):
        await connection.recv()


async def test_library_errors_on_recv_close_the_channel(monkeypatch: pytest.MonkeyPatch) -> None:
    connection = await _connected(monkeypatch, FakeSocket([WebSocketException("concurrent recv")]))

    with pytest.raises(ChannelClosed, match="concurrent recv"):
        await connection.recv()


async def test_proxy_misconfiguration_becomes_network_error(monkeypatch: pytest.MonkeyPatch) -> None:
    async def bad_proxy(url: str, **kwargs: Any) -> FakeSocket:
        raise InvalidProxy("notaproxy://x", "unsupported proxy scheme")

    monkeypatch.setattr(websocket_module.websockets, "connect", bad_proxy)

    with pytest.raises(NetworkError):
        await WebSocketTransport().connect("ws://push/ws")
