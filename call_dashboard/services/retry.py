"""Reconnect delay policies for the live update channel."""
from __future__ import annotations

from abc import ABC, abstractmethod

from call_dashboard.config import MAX_RECONNECT_DELAY_SECONDS, RECONNECT_DELAY_SECONDS


class RetryPolicy(ABC):
    """Decides how long to wait before the next reconnect attempt."""

    @abstractmethod
    def next_delay(self) -> float:
        """Return the delay for the upcoming attempt."""

    def reset(self) -> None:
        """Called when a connection is established."""


class FixedDelay(RetryPolicy):
    """Always waits the same amount of time."""

    def __init__(self, delay: float = RECONNECT_DELAY_SECONDS) -> None:
        if delay < 0:
            raise ValueError("delay must not be negative")
        self._delay = delay

    def next_delay(self) -> float:
        return self._delay


class BoundedBackoff(RetryPolicy):
    """Doubles the delay after each failed attempt up to ``max_delay``."""

    def __init__(
        self,
        initial: float = RECONNECT_DELAY_SECONDS,
        max_delay: float = MAX_RECONNECT_DELAY_SECONDS,
        factor: float = 2.0,
    ) -> None:
        if initial <= 0 or max_delay < initial or factor < 1:
            raise ValueError("invalid backoff parameters")
        self._initial = initial
        self._max_delay = max_delay
        self._factor = factor
        self._attempt = 0

    def next_delay(self) -> float:
        delay = min(self._initial * self._factor ** self._attempt, self._max_delay)
        if delay < self._max_delay:
            self._attempt += 1
        return delay

    def reset(self) -> None:
        self._attempt = 0
