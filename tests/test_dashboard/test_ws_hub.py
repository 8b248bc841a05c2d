"""Tests for the WebSocket price hub and the periodic price push."""

import asyncio
import json
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from ratefeed.config import AppSettings
from ratefeed.dashboard.app import create_dashboard_app
from ratefeed.dashboard.formatting import format_crypto, format_rate, format_usd
from ratefeed.dashboard.routes.ws import PriceHub
from ratefeed.dashboard.update_loop import dashboard_update_loop
from ratefeed.market_data.price_source import PriceSource


class TestPriceHub:
    @pytest.mark.asyncio
    async def test_connect_sends_current_snapshot_first(self) -> None:
        hub = PriceHub()
        ws = AsyncMock()
        await hub.connect(ws, "current")
        ws.accept.assert_awaited_once()
        ws.send_text.assert_awaited_once_with("current")
        assert hub.connections == [ws]

    @pytest.mark.asyncio
    async def test_broadcast_to_all(self) -> None:
        hub = PriceHub()
        a, b = AsyncMock(), AsyncMock()
        await hub.connect(a, "hello")
        await hub.connect(b, "hello")
        assert await hub.broadcast("tick") == 2
        a.send_text.assert_awaited_with("tick")
        b.send_text.assert_awaited_with("tick")

    @pytest.mark.asyncio
    async def test_broken_connection_removed(self) -> None:
        hub = PriceHub()
        good, broken = AsyncMock(), AsyncMock()
        await hub.connect(good, "x")
        await hub.connect(broken, "x")
        broken.send_text = AsyncMock(side_effect=RuntimeError("closed"))
        assert await hub.broadcast("x") == 1
        assert hub.connections == [good]

    @pytest.mark.asyncio
    async def test_disconnect(self) -> None:
        hub = PriceHub()
        ws = AsyncMock()
        await hub.connect(ws, "x")
        hub.disconnect(ws)
        hub.disconnect(ws)
        assert hub.connections == []


class TestWebSocketEndpoint:
    def test_snapshot_pushed_on_connect(
        self, mock_settings: AppSettings, price_source: PriceSource
    ) -> None:
        app = create_dashboard_app()
        app.state.settings = mock_settings
        app.state.price_source = price_source
        client = TestClient(app)

        with client.websocket_connect("/ws") as ws:
            message = ws.receive_json()

        assert message["prices"] == {"ETH": "3450", "BTC": "60000", "USDT": "1"}
        assert message["source"] == "feed"
        assert message["sequence"] == 0


class TestUpdateLoop:
    @pytest.mark.asyncio
    async def test_broadcasts_prices(
        self, mock_settings: AppSettings, price_source: PriceSource
    ) -> None:
        hub = PriceHub()
        ws = AsyncMock()
        await hub.connect(ws, "initial")
        app = SimpleNamespace(
            state=SimpleNamespace(
                hub=hub,
                price_source=price_source,
                settings=mock_settings,
                update_interval=0.01,
            )
        )

        task = asyncio.create_task(dashboard_update_loop(app))  # type: ignore[arg-type]
        await asyncio.sleep(0.05)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

        assert ws.send_text.await_count >= 2
        message = json.loads(ws.send_text.await_args.args[0])
        assert message["prices"]["BTC"] == "60000"
        assert message["source"] == "feed"

    @pytest.mark.asyncio
    async def test_idle_without_subscribers(
        self, mock_settings: AppSettings, price_source: PriceSource
    ) -> None:
        hub = PriceHub()
        hub.broadcast = AsyncMock()  # type: ignore[method-assign]
        app = SimpleNamespace(
            state=SimpleNamespace(
                hub=hub,
                price_source=price_source,
                settings=mock_settings,
                update_interval=0.01,
            )
        )

        task = asyncio.create_task(dashboard_update_loop(app))  # type: ignore[arg-type]
        await asyncio.sleep(0.05)
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

        hub.broadcast.assert_not_awaited()


class TestFormatting:
    def test_format_usd(self) -> None:
        assert format_usd(Decimal("1234.5")) == "$1,234.50"
        assert format_usd(Decimal("0.005")) == "$0.01"

    def test_format_crypto_drops_trailing_zeros(self) -> None:
        assert format_crypto(Decimal("0.0165625")) == "0.016563"
        assert format_crypto(Decimal("1.5")) == "1.5"
        assert format_crypto(Decimal("12345")) == "12,345"

    def test_format_rate_six_decimals(self) -> None:
        assert format_rate(Decimal("17.391304347826")) == "17.391304"
        assert format_rate(Decimal("1")) == "1.000000"
