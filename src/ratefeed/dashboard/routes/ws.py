"""WebSocket push of price snapshots to dashboard clients.

A client receives the current snapshot as soon as it connects, then every
snapshot the update loop broadcasts. Messages are the same JSON document
served by ``GET /api/prices``.
"""

from __future__ import annotations

import json

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ratefeed.dashboard.routes.api import prices_payload
from ratefeed.market_data.price_source import PriceSource

log = structlog.get_logger(__name__)

router = APIRouter()


def prices_message(price_source: PriceSource, stale_after: float) -> str:
    return json.dumps(prices_payload(price_source, stale_after))


class PriceHub:
    """Connected price subscribers."""

    def __init__(self) -> None:
        self.connections: list[WebSocket] = []

    async def connect(self, ws: WebSocket, current: str) -> None:
        """Accept ``ws`` and send it ``current`` before it joins broadcasts."""
        await ws.accept()
        await ws.send_text(current)
        self.connections.append(ws)
        log.info("price_subscriber_connected", total=len(self.connections))

    def disconnect(self, ws: WebSocket) -> None:
        if ws in self.connections:
            self.connections.remove(ws)
        log.info("price_subscriber_disconnected", total=len(self.connections))

    async def broadcast(self, message: str) -> int:
        """Send ``message`` to every subscriber, dropping broken connections.

        Returns:
            Number of subscribers the message reached.
        """
        delivered = 0
        for ws in self.connections.copy():
            try:
                await ws.send_text(message)
                delivered += 1
            except Exception:
                self.connections.remove(ws)
                log.warning("price_push_failed", remaining=len(self.connections))
        return delivered


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Live price stream, starting with the current snapshot."""
    hub: PriceHub = websocket.app.state.hub
    state = websocket.app.state
    await hub.connect(websocket, prices_message(state.price_source, state.settings.feed.stale_after))
    try:
        while True:
            # Client messages are ignored; reading detects the disconnect
            await websocket.receive_text()
    except WebSocketDisconnect:
        hub.disconnect(websocket)
