"""HTTP entry point wired to hexagonal architecture services."""
from __future__ import annotations

import os

import uvicorn

from call_dashboard.adapters.push.websocket import WebSocketTransport
from call_dashboard.adapters.rest.http_store import HttpCallStoreAdapter
from call_dashboard.adapters.scheduler.asyncio_loop import AsyncioScheduler
from call_dashboard.adapters.settings.env import EnvSettingsAdapter
from call_dashboard.api.http import create_api_app
from call_dashboard.logging_config import configure_logging
from call_dashboard.services.dashboard import CallDashboard
from call_dashboard.services.endpoints import EndpointService


# ----------------------------------------------------------------------------
# Dependency wiring
# ----------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
HOST = os.environ.get("HOST", "127.0.0.1")
PORT = int(os.environ.get("PORT", "8000"))

configure_logging(LOG_LEVEL)

settings_adapter = EnvSettingsAdapter()
endpoint_service = EndpointService(settings_adapter)
endpoints = endpoint_service.resolve()

dashboard = CallDashboard(
    store=HttpCallStoreAdapter(endpoints.rest_base_url),
    transport=WebSocketTransport(),
    scheduler=AsyncioScheduler(),
    push_url=endpoints.push_url,
    limit=endpoints.page_limit,
)
app = create_api_app(dashboard)


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())
