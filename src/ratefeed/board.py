"""Presentation boundary for the swap page.

Everything a rendering layer may read or change goes through SwapBoard:
the current snapshot and its timestamp, the derived rate and receive
estimate, and the five selection mutators.
"""

from decimal import Decimal
from typing import Any

from ratefeed.market_data.price_source import PriceSource
from ratefeed.models import Asset, PriceSnapshot, Quote, Selection
from ratefeed.pricing.rate_calculator import RateCalculator
from ratefeed.selection.state import SelectionState


class SwapBoard:
    """Read-side view over PriceSource + SelectionState, recomputed on every read."""

    def __init__(
        self,
        price_source: PriceSource,
        selection: SelectionState,
        calculator: RateCalculator,
    ) -> None:
        self._prices = price_source
        self._selection = selection
        self._calculator = calculator

    @property
    def snapshot(self) -> PriceSnapshot:
        return self._prices.snapshot

    @property
    def last_updated(self) -> float:
        return self._prices.last_updated

    @property
    def selection(self) -> Selection:
        return self._selection.current

    @property
    def live_rate(self) -> Decimal:
        current = self._selection.current
        return self._calculator.live_rate(current.from_asset, current.to_asset, self.snapshot)

    @property
    def estimated_receive(self) -> Decimal:
        current = self._selection.current
        return self._calculator.estimated_receive(
            current.send_amount_usd, current.receive_asset, self.snapshot
        )

    def quote(self) -> Quote:
        return self._calculator.quote(self._selection.current, self.snapshot)

    def set_from_asset(self, asset: Asset | str) -> Selection:
        return self._selection.set_from_asset(asset)

    def set_to_asset(self, asset: Asset | str) -> Selection:
        return self._selection.set_to_asset(asset)

    def set_receive_asset(self, asset: Asset | str) -> Selection:
        return self._selection.set_receive_asset(asset)

    def set_send_amount_usd(self, amount: Any) -> Selection:
        return self._selection.set_send_amount_usd(amount)

    def swap_assets(self) -> Selection:
        return self._selection.swap_assets()
