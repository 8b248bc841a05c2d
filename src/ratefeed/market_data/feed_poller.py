"""Feed poller -- keeps the PriceSource fresh on a fixed timer.

Each tick tries the real feed first. Any failure (network error, non-OK
status, malformed payload) is absorbed: the poller derives a simulated
snapshot from the previous one instead, so the displayed rate keeps moving
and no error ever reaches the viewer. Failures are never retried faster than
the fixed period.

Teardown is final for a poller instance. A fetch that resolves after stop()
is discarded before it can reach the PriceSource.
"""

import asyncio
import random
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from ratefeed.config import FeedSettings
from ratefeed.exceptions import FeedUnavailableError
from ratefeed.logging import get_logger
from ratefeed.market_data.price_feed import PriceFeed
from ratefeed.market_data.price_source import PriceSource
from ratefeed.market_data.simulator import drift_snapshot
from ratefeed.models import PriceSnapshot, SnapshotSource

logger = get_logger(__name__)


class PollerState(str, Enum):
    """Where the poller is within a tick."""

    IDLE = "idle"
    FETCHING = "fetching"
    SIMULATING = "simulating"
    STOPPED = "stopped"


class FeedPoller:
    """Drives the PriceSource with a fetch-or-simulate policy.

    Args:
        feed: Real price provider.
        price_source: The cell this poller publishes into (its only writer).
        settings: Poll period, drift band and price floor.
        rng: Random source for the simulator.
        clock: Timestamp source for published snapshots.
    """

    def __init__(
        self,
        feed: PriceFeed,
        price_source: PriceSource,
        settings: FeedSettings | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        settings = settings if settings is not None else FeedSettings()
        self._feed = feed
        self._price_source = price_source
        self._poll_interval = settings.poll_interval
        self._drift = settings.drift
        self._price_floor = settings.price_floor
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock

        self._state = PollerState.IDLE
        self._running = False
        self._cancelled = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

        self.ticks = 0
        self.fetch_failures = 0
        self.discarded_results = 0

    @property
    def state(self) -> PollerState:
        return self._state

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    async def start(self) -> None:
        """Begin polling in the background. The first tick runs immediately."""
        if self._running:
            logger.warning("feed_poller_already_running")
            return
        if self._cancelled:
            logger.warning("feed_poller_restart_refused", reason="poller was torn down")
            return
        self._running = True
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("feed_poller_started", poll_interval=self._poll_interval)

    async def stop(self) -> None:
        """Tear the poller down: stop the timer and discard any in-flight fetch."""
        self._running = False
        self._cancelled = True
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self._state = PollerState.STOPPED
        logger.info("feed_poller_stopped", ticks=self.ticks)

    async def _poll_loop(self) -> None:
        """Main timer loop: one tick per period regardless of the previous outcome."""
        loop = asyncio.get_running_loop()
        while self._running:
            started = loop.time()
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.warning("feed_poller_tick_error", exc_info=True)
            if self._running:
                elapsed = loop.time() - started
                await asyncio.sleep(max(0.0, self._poll_interval - elapsed))

    async def poll_once(self) -> PriceSnapshot | None:
        """Run a single tick.

        Returns:
            The published snapshot, or None if the poller was torn down
            before the tick could publish or the PriceSource refused it.
        """
        if self._cancelled:
            return None

        self.ticks += 1
        self._state = PollerState.FETCHING
        # Claimed before the fetch so a slow tick cannot overwrite a newer one
        sequence = self._price_source.snapshot.sequence + 1

        try:
            prices = await self._feed.fetch_prices()
            snapshot = PriceSnapshot(
                prices=prices,
                captured_at=self._clock(),
                source=SnapshotSource.FEED,
                sequence=sequence,
            )
        except FeedUnavailableError as e:
            if self._discard_if_cancelled():
                return None
            self.fetch_failures += 1
            logger.info("feed_unavailable", reason=e.reason)
            return self._simulate(sequence)
        except ValueError as e:
            # Provider returned prices that do not form a valid snapshot
            if self._discard_if_cancelled():
                return None
            self.fetch_failures += 1
            logger.info("feed_unavailable", reason=str(e))
            return self._simulate(sequence)
        except Exception as e:
            if self._discard_if_cancelled():
                return None
            self.fetch_failures += 1
            logger.warning("feed_unavailable", reason=f"{type(e).__name__}: {e}", exc_info=True)
            return self._simulate(sequence)

        if self._discard_if_cancelled():
            return None

        return self._publish(snapshot)

    def _simulate(self, sequence: int) -> PriceSnapshot | None:
        self._state = PollerState.SIMULATING
        snapshot = drift_snapshot(
            self._price_source.snapshot,
            drift=self._drift,
            price_floor=self._price_floor,
            rng=self._rng,
            captured_at=self._clock(),
            sequence=sequence,
        )
        return self._publish(snapshot)

    def _publish(self, snapshot: PriceSnapshot) -> PriceSnapshot | None:
        published = self._price_source.publish(snapshot)
        self._state = PollerState.IDLE
        if not published:
            return None
        logger.debug("snapshot_published", source=snapshot.source.value, sequence=snapshot.sequence)
        return snapshot

    def _discard_if_cancelled(self) -> bool:
        if not self._cancelled:
            return False
        self.discarded_results += 1
        logger.info("late_fetch_result_discarded")
        return True

    def get_status(self) -> dict[str, Any]:
        """Return poller state and counters for the status endpoint."""
        return {
            "state": self._state.value,
            "running": self._running,
            "poll_interval": self._poll_interval,
            "ticks": self.ticks,
            "fetch_failures": self.fetch_failures,
            "discarded_results": self.discarded_results,
        }
