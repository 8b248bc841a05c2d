"""Entry point for the swap rate feed.

Wires all components together, optionally embeds the FastAPI dashboard,
and starts the feed poller. When the dashboard is enabled (default), the
poller and dashboard share a single asyncio event loop via uvicorn's
programmatic API and FastAPI's lifespan context manager.

Handles SIGINT/SIGTERM for graceful shutdown.

Component wiring order (in _build_components):
1. AppSettings (configuration)
2. Logging setup
3. PriceSource (shared snapshot cell, seeded)
4. CoinGeckoFeed (HTTP price client)
5. FeedPoller (fetch-or-simulate timer loop)
6. RateCalculator (fee-adjusted quotes)
"""

import asyncio
import signal
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from ratefeed.config import AppSettings
from ratefeed.logging import get_logger, setup_logging
from ratefeed.market_data.feed_poller import FeedPoller
from ratefeed.market_data.price_feed import CoinGeckoFeed
from ratefeed.market_data.price_source import PriceSource
from ratefeed.pricing.rate_calculator import RateCalculator


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all components from settings.

    Does NOT start the poller -- that happens in the lifespan (dashboard
    mode) or run() (headless mode).
    """
    price_source = PriceSource()
    feed = CoinGeckoFeed(settings.feed)
    poller = FeedPoller(feed, price_source, settings.feed)
    calculator = RateCalculator(settings.fees)

    return {
        "price_source": price_source,
        "feed": feed,
        "poller": poller,
        "calculator": calculator,
    }


def _setup_signal_handlers(stop_event: asyncio.Event) -> None:
    """Register SIGINT/SIGTERM to set the stop event.

    Must be called after the asyncio event loop is running.
    """
    logger = get_logger("ratefeed.main")
    loop = asyncio.get_running_loop()

    def _graceful_handler() -> None:
        logger.info("graceful_shutdown_signal")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _graceful_handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage poller lifecycle within the FastAPI application.

    On startup: stores components on app.state, starts the poller and the
    dashboard update loop. On shutdown: cancels the update loop and tears
    the poller down.
    """
    from ratefeed.dashboard.update_loop import dashboard_update_loop

    logger = get_logger("ratefeed.main")
    settings = app.state.settings
    components = app.state.components

    app.state.price_source = components["price_source"]
    app.state.poller = components["poller"]
    app.state.calculator = components["calculator"]
    app.state.update_interval = settings.dashboard.update_interval

    await components["poller"].start()
    update_task = asyncio.create_task(dashboard_update_loop(app))

    logger.info("lifespan_started", poll_interval=settings.feed.poll_interval)

    yield

    update_task.cancel()
    try:
        await update_task
    except asyncio.CancelledError:
        pass

    await components["poller"].stop()

    logger.info("swap_rate_feed_stopped")


async def run() -> None:
    """Run the swap rate feed.

    When the dashboard is enabled (DASHBOARD_ENABLED=true, the default),
    uvicorn serves the API and the lifespan manages the poller. Otherwise
    the poller runs headless until SIGINT/SIGTERM.
    """
    settings = AppSettings()

    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("ratefeed.main")

    components = _build_components(settings)

    if settings.dashboard.enabled:
        from ratefeed.dashboard.app import create_dashboard_app

        app = create_dashboard_app(lifespan=lifespan)
        app.state.settings = settings
        app.state.components = components

        logger.info(
            "starting_with_dashboard",
            host=settings.dashboard.host,
            port=settings.dashboard.port,
        )

        config = uvicorn.Config(
            app,
            host=settings.dashboard.host,
            port=settings.dashboard.port,
            log_level="warning",  # Suppress uvicorn access logs
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        stop_event = asyncio.Event()
        _setup_signal_handlers(stop_event)

        logger.info("starting_without_dashboard", poll_interval=settings.feed.poll_interval)

        poller: FeedPoller = components["poller"]
        try:
            await poller.start()
            await stop_event.wait()
        finally:
            await poller.stop()
            logger.info("swap_rate_feed_stopped")


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
