"""REST adapter for the dashboard call store."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

from call_dashboard.config import CALLS_API_PATH, HTTP_TIMEOUT_SECONDS
from call_dashboard.domain.exceptions import NetworkError, ServerError
from call_dashboard.domain.models import CallPage, CallRecord
from call_dashboard.ports.call_store import CallStorePort

logger = logging.getLogger(__name__)


class _HTTPClient:
    """Small wrapper to make requests session injectable."""

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self._session = session or requests.Session()

    def get(self, *args, **kwargs) -> requests.Response:
        return self._session.get(*args, **kwargs)

    def delete(self, *args, **kwargs) -> requests.Response:
        return self._session.delete(*args, **kwargs)


def _error_details(response: Any) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("details"):
        return str(payload["details"])
    return None


class HttpCallStoreAdapter(CallStorePort):
    """Call store backed by the dashboard REST API.

    The blocking ``requests`` calls run in a worker thread so the event loop
    that owns the view state is never blocked.
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[requests.Session] = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = _HTTPClient(http_client)
        self._timeout = timeout

    async def fetch_page(self, page: int, limit: int, search: str = "") -> CallPage:
        return await asyncio.to_thread(self.get_page, page, limit, search)

    async def delete_call(self, call_id: str) -> None:
        await asyncio.to_thread(self.remove, call_id)

    def get_page(self, page: int, limit: int, search: str = "") -> CallPage:
        """Blocking page fetch."""
        url = f"{self._base_url}{CALLS_API_PATH}"
        params: dict[str, str | int] = {"page": page, "limit": limit}
        if search:
            params["search"] = search
        try:
            response = self._http.get(url, params=params, headers={"Accept": "application/json"}, timeout=self._timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Failed to fetch calls: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise ServerError(
                f"Failed to fetch calls (HTTP {response.status_code})",
                status_code=response.status_code,
                details=_error_details(response),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ServerError("Calls response is not valid JSON", status_code=response.status_code) from exc
        if not isinstance(payload, dict):
            raise ServerError("Calls response has an unexpected shape", status_code=response.status_code)

        pagination = payload.get("pagination") or {}
        try:
            calls = [CallRecord.model_validate(item) for item in payload.get("calls") or []]
            return CallPage(
                calls=calls,
                total=int(pagination.get("total", len(calls))),
                current_page=int(pagination.get("currentPage", page)),
            )
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning("Rejected malformed calls page %s: %s", page, exc)
            raise ServerError("Calls response is malformed", status_code=response.status_code) from exc

    def remove(self, call_id: str) -> None:
        """Blocking delete."""
        url = f"{self._base_url}{CALLS_API_PATH}/{quote(call_id, safe='')}"
        try:
            response = self._http.delete(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise NetworkError(f"Failed to delete call {call_id}: {exc}") from exc
        if not 200 <= response.status_code < 300:
            details = _error_details(response)
            raise ServerError(
                details or f"Failed to delete call {call_id} (HTTP {response.status_code})",
                status_code=response.status_code,
                details=details,
            )
