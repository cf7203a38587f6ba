"""FastAPI application exposing the call dashboard view state."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from call_dashboard.domain.models import ViewSnapshot
from call_dashboard.services.dashboard import CallDashboard


class SearchRequest(BaseModel):
    """Request body for the search endpoint."""

    term: str = ""


def create_api_app(dashboard: CallDashboard) -> FastAPI:
    """Create a configured FastAPI application.

    The dashboard is started with the application and stopped on shutdown.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await dashboard.start()
        try:
            yield
        finally:
            await dashboard.stop()

    app = FastAPI(title="Call Dashboard API", lifespan=lifespan)

    @app.get("/state", response_model=ViewSnapshot)
    async def state() -> ViewSnapshot:
        return dashboard.snapshot()

    @app.get("/channel")
    async def channel() -> Dict[str, str]:
        return {"state": dashboard.channel_state.value, "url": dashboard.channel.url}

    @app.post("/search", response_model=ViewSnapshot)
    async def search(req: SearchRequest) -> ViewSnapshot:
        await dashboard.queries.set_search(req.term.strip())
        return dashboard.snapshot()

    @app.post("/page/{page}", response_model=ViewSnapshot)
    async def page(page: int) -> ViewSnapshot:
        if page < 1:
            raise HTTPException(status_code=400, detail="Page must be positive")
        await dashboard.queries.set_page(page)
        return dashboard.snapshot()

    @app.post("/refresh", response_model=ViewSnapshot)
    async def refresh() -> ViewSnapshot:
        await dashboard.queries.refresh()
        return dashboard.snapshot()

    @app.delete("/calls/{call_id}", response_model=ViewSnapshot)
    async def delete_call(call_id: str) -> ViewSnapshot:
        if not await dashboard.delete_call(call_id):
            raise HTTPException(status_code=502, detail=dashboard.snapshot().error)
        return dashboard.snapshot()

    return app
