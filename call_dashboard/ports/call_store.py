"""Remote call store port."""
from __future__ import annotations

from abc import ABC, abstractmethod

from call_dashboard.domain.models import CallPage


class CallStorePort(ABC):
    """Abstract access to the remote store holding call records."""

    @abstractmethod
    async def fetch_page(self, page: int, limit: int, search: str = "") -> CallPage:
        """Return one page of calls, most recent first, filtered by ``search``."""

    @abstractmethod
    async def delete_call(self, call_id: str) -> None:
        """Delete the call or raise :class:`ServerError` / :class:`NetworkError`."""
