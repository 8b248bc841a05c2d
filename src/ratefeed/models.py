"""Shared data models for the swap rate feed.

CRITICAL: All monetary values use Decimal. Never use float for prices, amounts, or fees.
"""

import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from types import MappingProxyType

from ratefeed.exceptions import UnknownAssetError


class Asset(str, Enum):
    """Tradable ticker tracked by the feed. The set is closed."""

    ETH = "ETH"
    BTC = "BTC"
    USDT = "USDT"

    @property
    def feed_id(self) -> str:
        """Identifier of this asset on the simple-price endpoint."""
        return _FEED_IDS[self]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, code: object, allowed: "frozenset[Asset] | None" = None) -> "Asset":
        """Return the asset for an exact ticker code.

        Raises:
            UnknownAssetError: If the code is not a member of ``allowed``
                (all assets when omitted).
        """
        allowed_set = allowed if allowed is not None else ALL_ASSETS
        names = tuple(a.value for a in cls if a in allowed_set)
        if not isinstance(code, str):
            raise UnknownAssetError(code, names)
        try:
            asset = cls(code)
        except ValueError:
            raise UnknownAssetError(code, names) from None
        if asset not in allowed_set:
            raise UnknownAssetError(code, names)
        return asset


_FEED_IDS: dict[Asset, str] = {
    Asset.ETH: "ethereum",
    Asset.BTC: "bitcoin",
    Asset.USDT: "tether",
}

_DISPLAY_NAMES: dict[Asset, str] = {
    Asset.ETH: "Ethereum",
    Asset.BTC: "Bitcoin",
    Asset.USDT: "Tether",
}

ALL_ASSETS: frozenset[Asset] = frozenset(Asset)

# Only these can be picked as the calculator's receive target.
RECEIVE_ASSETS: frozenset[Asset] = frozenset({Asset.ETH, Asset.BTC})

SEED_PRICES: dict[Asset, Decimal] = {
    Asset.ETH: Decimal("3450"),
    Asset.BTC: Decimal("60000"),
    Asset.USDT: Decimal("1"),
}


class SnapshotSource(str, Enum):
    """Where a snapshot's prices came from."""

    SEED = "seed"
    FEED = "feed"
    SIMULATED = "simulated"


@dataclass(frozen=True)
class PriceSnapshot:
    """Immutable set of per-asset USD prices captured at one instant.

    Every asset has exactly one strictly positive price; construction fails
    otherwise. The mapping is read-only so a snapshot can be shared freely.
    """

    prices: Mapping[Asset, Decimal]
    captured_at: float = field(default_factory=time.time)
    source: SnapshotSource = SnapshotSource.SEED
    # Poll tick that produced the snapshot; orders publication independently
    # of wall-clock time.
    sequence: int = 0

    def __post_init__(self) -> None:
        prices = {Asset(k): Decimal(v) for k, v in self.prices.items()}
        missing = ALL_ASSETS - prices.keys()
        if missing:
            raise ValueError(
                f"Snapshot is missing prices for {sorted(a.value for a in missing)}"
            )
        for asset, price in prices.items():
            if not price.is_finite() or price <= 0:
                raise ValueError(f"Price for {asset.value} must be positive, got {price}")
        object.__setattr__(self, "prices", MappingProxyType(prices))

    def price(self, asset: Asset) -> Decimal:
        return self.prices[asset]

    @classmethod
    def seed(cls, captured_at: float | None = None) -> "PriceSnapshot":
        """Snapshot used at startup before the first tick lands."""
        return cls(
            prices=SEED_PRICES,
            captured_at=time.time() if captured_at is None else captured_at,
            source=SnapshotSource.SEED,
        )


@dataclass(frozen=True)
class Selection:
    """User-chosen asset pair, receive asset and send amount."""

    from_asset: Asset = Asset.ETH
    to_asset: Asset = Asset.BTC
    receive_asset: Asset = Asset.ETH
    send_amount_usd: Decimal = Decimal("1000")

    def location_params(self) -> dict[str, str]:
        """Query parameters mirrored into the addressable location."""
        return {
            "from": self.from_asset.value,
            "to": self.to_asset.value,
            "receive": self.receive_asset.value,
        }


@dataclass(frozen=True)
class Quote:
    """Derived values for one selection against one snapshot."""

    from_asset: Asset
    to_asset: Asset
    receive_asset: Asset
    live_rate: Decimal
    send_amount_usd: Decimal
    swap_fee_usd: Decimal
    network_fee_usd: Decimal
    usd_after_fees: Decimal
    estimated_receive: Decimal
    snapshot_source: SnapshotSource
    captured_at: float
