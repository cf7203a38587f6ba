"""Timer scheduling port."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """Handle of a scheduled callback."""

    def cancel(self) -> None:
        ...


class SchedulerPort(ABC):
    """Schedules callbacks on the owner's event loop."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
