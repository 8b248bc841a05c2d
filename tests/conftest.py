"""Shared test fixtures for the swap rate feed."""

import itertools
from decimal import Decimal

import pytest

from ratefeed.config import AppSettings, DashboardSettings, FeedSettings, FeeSettings
from ratefeed.market_data.price_source import PriceSource
from ratefeed.models import Asset, PriceSnapshot, SnapshotSource

# Prices from the product page's seed defaults
SAMPLE_PRICES = {
    Asset.ETH: Decimal("3450"),
    Asset.BTC: Decimal("60000"),
    Asset.USDT: Decimal("1"),
}


@pytest.fixture
def feed_settings() -> FeedSettings:
    """Feed settings with a short poll interval for loop tests."""
    return FeedSettings(poll_interval=0.05, request_timeout=0.04)


@pytest.fixture
def fee_settings() -> FeeSettings:
    """Default 0.5% + $1.25 fee structure."""
    return FeeSettings()


@pytest.fixture
def mock_settings(feed_settings: FeedSettings, fee_settings: FeeSettings) -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        feed=feed_settings,
        fees=fee_settings,
        dashboard=DashboardSettings(enabled=False, update_interval=1),
    )


@pytest.fixture
def snapshot() -> PriceSnapshot:
    """ETH 3450 / BTC 60000 / USDT 1 captured at t=1000."""
    return PriceSnapshot(prices=SAMPLE_PRICES, captured_at=1000.0, source=SnapshotSource.FEED)


@pytest.fixture
def price_source(snapshot: PriceSnapshot) -> PriceSource:
    return PriceSource(snapshot)


@pytest.fixture
def clock():
    """Monotonic fake clock starting after the sample snapshot."""
    ticks = itertools.count(2000)
    return lambda: float(next(ticks))
