"""Single-writer cell holding the current price snapshot.

The FeedPoller is the only writer. Readers get the snapshot object itself;
since snapshots are immutable and publication is one attribute assignment,
no reader can observe a mix of old and new prices.
"""

import time
from decimal import Decimal

from ratefeed.logging import get_logger
from ratefeed.models import Asset, PriceSnapshot

logger = get_logger(__name__)


class PriceSource:
    """Current USD price snapshot with staleness detection."""

    def __init__(self, initial: PriceSnapshot | None = None) -> None:
        self._snapshot = initial if initial is not None else PriceSnapshot.seed()

    @property
    def snapshot(self) -> PriceSnapshot:
        return self._snapshot

    @property
    def last_updated(self) -> float:
        """Unix timestamp of the current snapshot."""
        return self._snapshot.captured_at

    def price(self, asset: Asset) -> Decimal:
        return self._snapshot.price(asset)

    def publish(self, snapshot: PriceSnapshot) -> bool:
        """Replace the current snapshot.

        A snapshot from an earlier poll tick than the current one is dropped.
        Ordering uses the tick sequence, so a wall clock stepping backwards
        never blocks fresh prices.

        Returns:
            True if the snapshot was published.
        """
        if snapshot.sequence < self._snapshot.sequence:
            logger.warning(
                "out_of_order_snapshot_dropped",
                sequence=snapshot.sequence,
                current=self._snapshot.sequence,
            )
            return False
        self._snapshot = snapshot
        return True

    def age(self, now: float | None = None) -> float:
        """Return seconds since the current snapshot was captured."""
        now = time.time() if now is None else now
        return now - self._snapshot.captured_at

    def is_stale(self, max_age_seconds: float = 90.0) -> bool:
        return self.age() > max_age_seconds
