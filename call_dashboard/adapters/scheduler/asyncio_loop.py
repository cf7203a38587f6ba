"""Scheduler adapter backed by the running asyncio loop."""
from __future__ import annotations

import asyncio
from typing import Callable, Optional

from call_dashboard.ports.scheduler import SchedulerPort, TimerHandle


class AsyncioScheduler(SchedulerPort):
    """Schedules callbacks with :meth:`asyncio.AbstractEventLoop.call_later`."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
