"""Endpoint configuration service."""
from __future__ import annotations

import re
from dataclasses import dataclass

from call_dashboard.config import (
    DASHBOARD_URL_KEY,
    DEFAULT_DASHBOARD_URL,
    DEFAULT_PAGE_LIMIT,
    DEFAULT_PUSH_SERVER_URL,
    PAGE_LIMIT_KEY,
    PUSH_PATH,
    PUSH_SERVER_URL_KEY,
)
from call_dashboard.domain.exceptions import SettingsError
from call_dashboard.ports.settings import SettingsPort

_HTTP_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


@dataclass(frozen=True)
class DashboardEndpoints:
    """Resolved locations of the remote store."""

    rest_base_url: str
    push_url: str
    page_limit: int = DEFAULT_PAGE_LIMIT


def build_push_url(dashboard_url: str, push_server_url: str) -> str:
    """Return the push channel URL.

    The scheme follows the dashboard's own transport security, the host comes
    from the push server URL.
    """

    scheme = "wss" if dashboard_url.lower().startswith("https://") else "ws"
    host = _HTTP_SCHEME.sub("", push_server_url.strip()).rstrip("/")
    if not host:
        raise SettingsError("Push server host is empty")
    return f"{scheme}://{host}{PUSH_PATH}"


class EndpointService:
    """Resolves dashboard endpoints using the settings port."""

    def __init__(
        self,
        settings: SettingsPort,
        default_dashboard_url: str = DEFAULT_DASHBOARD_URL,
        default_push_server_url: str = DEFAULT_PUSH_SERVER_URL,
    ) -> None:
        self._settings = settings
        self._default_dashboard_url = default_dashboard_url
        self._default_push_server_url = default_push_server_url

    def resolve(self) -> DashboardEndpoints:
        """Return endpoints, falling back to the local-development defaults."""

        dashboard_url = self._settings.get_optional_setting(DASHBOARD_URL_KEY) or self._default_dashboard_url
        push_server = self._settings.get_optional_setting(PUSH_SERVER_URL_KEY) or self._default_push_server_url
        raw_limit = self._settings.get_optional_setting(PAGE_LIMIT_KEY)
        limit = DEFAULT_PAGE_LIMIT
        if raw_limit is not None:
            try:
                limit = int(raw_limit)
            except ValueError as exc:
                raise SettingsError(f"{PAGE_LIMIT_KEY} must be an integer, got {raw_limit!r}") from exc
            if limit < 1:
                raise SettingsError(f"{PAGE_LIMIT_KEY} must be positive, got {limit}")
        return DashboardEndpoints(
            rest_base_url=dashboard_url.rstrip("/"),
            push_url=build_push_url(dashboard_url, push_server),
            page_limit=limit,
        )
