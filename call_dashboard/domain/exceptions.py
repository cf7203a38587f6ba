"""Domain specific exceptions."""
from __future__ import annotations

from typing import Optional


class CallsDashboardError(Exception):
    """Base exception for the application."""


class NetworkError(CallsDashboardError):
    """Raised when the remote store or push server cannot be reached."""


class ServerError(CallsDashboardError):
    """Raised when the remote store answers with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class ProtocolError(CallsDashboardError):
    """Raised when a push frame cannot be decoded."""


class ChannelClosed(CallsDashboardError):
    """Raised when the push connection terminates, gracefully or not."""


class SettingsError(CallsDashboardError):
    """Raised when configuration values are missing or invalid."""
