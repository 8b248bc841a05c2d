"""Periodic price push to WebSocket subscribers."""

from __future__ import annotations

import asyncio

import structlog
from fastapi import FastAPI

from ratefeed.dashboard.routes.ws import prices_message

log = structlog.get_logger(__name__)


async def dashboard_update_loop(app: FastAPI) -> None:
    """Push the current price snapshot to every subscriber each interval.

    The snapshot is re-sent even when no tick landed in between, so clients
    see ``age_seconds`` and ``stale`` advance. Nothing is sent while nobody
    is connected. Runs until cancelled.

    Args:
        app: The FastAPI application; reads hub, price_source, settings and
             update_interval from app.state.
    """
    update_interval = getattr(app.state, "update_interval", 5)

    log.info("dashboard_update_loop_started", interval=update_interval)

    while True:
        try:
            await asyncio.sleep(update_interval)

            hub = app.state.hub
            if not hub.connections:
                continue

            price_source = app.state.price_source
            message = prices_message(price_source, app.state.settings.feed.stale_after)
            delivered = await hub.broadcast(message)
            log.debug(
                "prices_pushed",
                sequence=price_source.snapshot.sequence,
                subscribers=delivered,
            )

        except asyncio.CancelledError:
            log.info("dashboard_update_loop_cancelled")
            break
        except Exception:
            log.warning("dashboard_update_loop_error", exc_info=True)
            await asyncio.sleep(1)
