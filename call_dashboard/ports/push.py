"""Push channel transport port."""
from __future__ import annotations

from abc import ABC, abstractmethod


class PushConnection(ABC):
    """An open, receive-only connection to the push server."""

    @abstractmethod
    async def recv(self) -> str:
        """Return the next text frame or raise :class:`ChannelClosed`."""

    @abstractmethod
    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""


class PushTransportPort(ABC):
    """Opens connections to the push server."""

    @abstractmethod
    async def connect(self, url: str) -> PushConnection:
        """Perform the handshake or raise :class:`NetworkError`."""
