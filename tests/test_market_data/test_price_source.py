"""Tests for the PriceSource snapshot cell."""

import time
from decimal import Decimal

from ratefeed.market_data.price_source import PriceSource
from ratefeed.models import Asset, PriceSnapshot, SnapshotSource


def _snapshot(eth: str, captured_at: float, sequence: int = 0) -> PriceSnapshot:
    return PriceSnapshot(
        prices={Asset.ETH: Decimal(eth), Asset.BTC: Decimal("60000"), Asset.USDT: Decimal("1")},
        captured_at=captured_at,
        source=SnapshotSource.FEED,
        sequence=sequence,
    )


class TestPriceSource:
    def test_starts_with_seed(self) -> None:
        source = PriceSource()
        assert source.snapshot.source is SnapshotSource.SEED
        assert source.price(Asset.BTC) == Decimal("60000")

    def test_publish_replaces_whole_snapshot(self, price_source: PriceSource) -> None:
        new = _snapshot("3500", captured_at=2000.0)
        assert price_source.publish(new) is True
        assert price_source.snapshot is new
        assert price_source.last_updated == 2000.0

    def test_reader_keeps_old_snapshot(self, price_source: PriceSource) -> None:
        held = price_source.snapshot
        price_source.publish(_snapshot("9999", captured_at=2000.0))
        assert held.price(Asset.ETH) == Decimal("3450")

    def test_earlier_tick_dropped(self, price_source: PriceSource) -> None:
        current = _snapshot("3500", captured_at=2000.0, sequence=4)
        price_source.publish(current)
        assert price_source.publish(_snapshot("1", captured_at=3000.0, sequence=3)) is False
        assert price_source.snapshot is current

    def test_older_timestamp_from_later_tick_published(self, price_source: PriceSource) -> None:
        # Wall clock stepped back between ticks
        later = _snapshot("3999", captured_at=500.0, sequence=1)
        assert price_source.publish(later) is True
        assert price_source.snapshot is later

    def test_age(self, price_source: PriceSource) -> None:
        assert price_source.age(now=1012.5) == 12.5

    def test_is_stale_old_snapshot(self, price_source: PriceSource) -> None:
        # Sample snapshot is captured at t=1000, decades ago
        assert price_source.is_stale(max_age_seconds=60.0) is True

    def test_is_not_stale_fresh_snapshot(self) -> None:
        source = PriceSource(_snapshot("3450", captured_at=time.time()))
        assert source.is_stale(max_age_seconds=60.0) is False
