"""Central configuration for the call dashboard.
Keep tunable values here instead of hardcoding them inside services.
"""
from __future__ import annotations

# ---------------------------
# Remote endpoints
# ---------------------------
DEFAULT_DASHBOARD_URL = "http://localhost:3901"
DEFAULT_PUSH_SERVER_URL = "http://localhost:3902"
CALLS_API_PATH = "/api/calls"
PUSH_PATH = "/ws"
HTTP_TIMEOUT_SECONDS = 30

# Environment keys read through the settings port
DASHBOARD_URL_KEY = "DASHBOARD_URL"
PUSH_SERVER_URL_KEY = "BUN_SERVER"
PAGE_LIMIT_KEY = "CALLS_PAGE_LIMIT"

# ---------------------------
# Pagination
# ---------------------------
DEFAULT_PAGE_LIMIT = 10

# ---------------------------
# Timers (seconds)
# ---------------------------
RECONNECT_DELAY_SECONDS = 5.0
MAX_RECONNECT_DELAY_SECONDS = 60.0
DELETE_ERROR_TTL_SECONDS = 5.0

# ---------------------------
# User-facing messages
# ---------------------------
FETCH_ERROR_MESSAGE = "Failed to fetch calls"
DELETE_ERROR_MESSAGE = "Failed to delete call"
CHANNEL_ERROR_MESSAGE = "Failed to connect to WebSocket server"
EMPTY_SEARCH_MESSAGE = "No calls match your search"
EMPTY_LIST_MESSAGE = "No calls recorded yet"
