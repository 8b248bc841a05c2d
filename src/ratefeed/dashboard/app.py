"""FastAPI dashboard application factory with JSON API and WebSocket hub."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from ratefeed.dashboard.routes import actions, api, ws
from ratefeed.dashboard.routes.ws import PriceHub


def create_dashboard_app(lifespan: Any = None) -> FastAPI:
    """Create and configure the FastAPI dashboard application.

    Route handlers read ``settings``, ``price_source``, ``calculator`` and
    ``poller`` from app.state; the caller (main.py, or a test) sets them.

    Args:
        lifespan: Optional async context manager for application lifespan events.
                  Used by main.py to inject startup/shutdown logic.
    """
    app = FastAPI(
        title="Swap Rate Feed",
        lifespan=lifespan,
    )

    app.state.hub = PriceHub()

    app.include_router(api.router, prefix="/api")
    app.include_router(actions.router, prefix="/actions")
    app.include_router(ws.router)

    return app
