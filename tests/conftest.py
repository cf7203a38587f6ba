from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

import pytest

from call_dashboard.domain.exceptions import CallsDashboardError, ChannelClosed, NetworkError
from call_dashboard.domain.models import CallPage, CallRecord
from call_dashboard.ports.call_store import CallStorePort
from call_dashboard.ports.push import PushConnection, PushTransportPort
from call_dashboard.ports.scheduler import SchedulerPort


def call_payload(call_id: str, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": call_id,
        "from": "Alice",
        "to": "Clinic",
        "from_number": "+375291111111",
        "to_number": "+375292222222",
        "duration": "1:05",
        "recordingUrl": f"https://media.example/{call_id}.mp3",
        "piiUrl": f"https://media.example/{call_id}-redacted.mp3",
        "createdAt": "2024-06-01T10:00:00Z",
        "transcript": [
            {"speaker": "customer", "text": "Hello"},
            {"speaker": "assistant", "text": "How can I help?"},
        ],
    }
    payload.update(overrides)
    return payload


class FakeTimer:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler(SchedulerPort):
    """Scheduler whose timers only fire when the test says so."""

    def __init__(self) -> None:
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and not t.fired]

    def fire_pending(self) -> None:
        for timer in self.pending:
            timer.fired = True
            timer.callback()


class FakeConnection(PushConnection):
    def __init__(self) -> None:
        self._frames: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self.close_calls = 0

    def push(self, frame: str) -> None:
        self._frames.put_nowait(frame)

    def drop(self) -> None:
        self._frames.put_nowait(None)

    async def recv(self) -> str:
        frame = await self._frames.get()
        if frame is None:
            raise ChannelClosed("closed by server")
        return frame

    async def close(self) -> None:
        self.close_calls += 1
        self._frames.put_nowait(None)


class FakeTransport(PushTransportPort):
    def __init__(self) -> None:
        self.urls: list[str] = []
        self.connections: list[FakeConnection] = []
        self.failures = 0

    @property
    def attempts(self) -> int:
        return len(self.urls)

    async def connect(self, url: str) -> FakeConnection:
        self.urls.append(url)
        if self.failures:
            self.failures -= 1
            raise NetworkError("connection refused")
        connection = FakeConnection()
        self.connections.append(connection)
        return connection


class FakeStore(CallStorePort):
    def __init__(self) -> None:
        self.pages: dict[tuple[int, str], tuple[list[CallRecord], int]] = {}
        self.requests: list[tuple[int, int, str]] = []
        self.fetch_errors: dict[str, CallsDashboardError] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.delete_error: Optional[CallsDashboardError] = None
        self.deleted: list[str] = []

    async def fetch_page(self, page: int, limit: int, search: str = "") -> CallPage:
        self.requests.append((page, limit, search))
        gate = self.gates.get(search)
        if gate is not None:
            await gate.wait()
        if search in self.fetch_errors:
            raise self.fetch_errors[search]
        calls, total = self.pages.get((page, search), ([], 0))
        return CallPage(calls=calls, total=total, current_page=page)

    async def delete_call(self, call_id: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(call_id)


async def settle(rounds: int = 10) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def make_call() -> Callable[..., CallRecord]:
    def factory(call_id: str, **overrides: Any) -> CallRecord:
        return CallRecord.model_validate(call_payload(call_id, **overrides))

    return factory


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()
