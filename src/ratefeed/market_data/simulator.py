"""Synthetic price drift used while the feed is unreachable.

Keeps the displayed rate moving between failed fetches. Output is tagged
SnapshotSource.SIMULATED and is not market data.
"""

import random
import time
from decimal import Decimal

from ratefeed.models import PriceSnapshot, SnapshotSource


def drift_snapshot(
    previous: PriceSnapshot,
    drift: Decimal,
    price_floor: Decimal,
    rng: random.Random | None = None,
    captured_at: float | None = None,
    sequence: int | None = None,
) -> PriceSnapshot:
    """Derive the next snapshot from the previous one.

    Each price is multiplied by an independent factor drawn uniformly from
    ``[1 - drift, 1 + drift]`` and clamped to at least ``price_floor``.

    Args:
        previous: Snapshot to perturb.
        drift: Half-width of the multiplicative noise band (0.001 = 0.1%).
        price_floor: Smallest price a simulated tick may produce. Must be > 0.
        rng: Random source; a fresh ``random.Random`` when omitted.
        captured_at: Timestamp for the new snapshot, defaults to now.
        sequence: Poll tick of the new snapshot, defaults to the previous
            snapshot's sequence plus one.
    """
    if price_floor <= 0:
        raise ValueError("price_floor must be strictly positive")

    rng = rng if rng is not None else random.Random()
    low = float(1 - drift)
    high = float(1 + drift)

    prices = {}
    for asset, price in previous.prices.items():
        factor = Decimal(str(rng.uniform(low, high)))
        prices[asset] = max(price_floor, price * factor)

    return PriceSnapshot(
        prices=prices,
        captured_at=time.time() if captured_at is None else captured_at,
        source=SnapshotSource.SIMULATED,
        sequence=previous.sequence + 1 if sequence is None else sequence,
    )
