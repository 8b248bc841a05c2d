"""Exchange rate and fee-adjusted receive estimate.

All calculations use Decimal arithmetic exclusively -- no float conversions anywhere.
No rounding is applied; display formatting is the consumer's concern.

Fee defaults (FeeSettings):
  - Swap fee: 0.5% of the USD amount sent
  - Network fee: flat $1.25

A post-fee USD amount below zero is floored at zero, so the estimate is
never a negative quantity.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from ratefeed.config import FeeSettings
from ratefeed.logging import get_logger
from ratefeed.models import Asset, PriceSnapshot, Quote, Selection

logger = get_logger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")

# Larger amounts would overflow the default 28-digit context once fees and
# display rounding are applied.
MAX_SEND_AMOUNT_USD = Decimal("1000000000000")


def sanitize_amount(value: Any) -> Decimal:
    """Coerce a user-entered USD amount to a finite non-negative Decimal.

    Empty, non-numeric, non-finite and negative input all become zero, as
    does anything above ``MAX_SEND_AMOUNT_USD``.
    """
    if isinstance(value, bool):
        amount = None
    elif isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float, str)):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            amount = None
    else:
        amount = None

    if amount is None or not amount.is_finite() or amount < 0:
        logger.info("invalid_send_amount", raw=repr(value))
        return ZERO
    if amount > MAX_SEND_AMOUNT_USD:
        logger.info("invalid_send_amount", raw=repr(value), reason="above maximum")
        return ZERO
    return amount


def live_rate(from_asset: Asset, to_asset: Asset, snapshot: PriceSnapshot) -> Decimal:
    """Units of ``to_asset`` per one unit of ``from_asset``."""
    if from_asset == to_asset:
        return ONE
    return snapshot.price(from_asset) / snapshot.price(to_asset)


def usd_after_fees(
    send_amount_usd: Decimal, fee_pct: Decimal, network_fee_usd: Decimal
) -> Decimal:
    """USD left after the swap fee and network fee, floored at zero."""
    return max(ZERO, send_amount_usd - send_amount_usd * fee_pct - network_fee_usd)


def estimated_receive(
    send_amount_usd: Any,
    fee_pct: Decimal,
    network_fee_usd: Decimal,
    receive_asset: Asset,
    snapshot: PriceSnapshot,
) -> Decimal:
    """Quantity of ``receive_asset`` the user gets for ``send_amount_usd``.

    Args:
        send_amount_usd: Amount entered by the user; invalid input counts as zero.
        fee_pct: Swap fee as a fraction (0.005 = 0.5%).
        network_fee_usd: Flat network fee in USD.
        receive_asset: Asset delivered to the user.
        snapshot: Prices to convert with.
    """
    amount = sanitize_amount(send_amount_usd)
    return usd_after_fees(amount, fee_pct, network_fee_usd) / snapshot.price(receive_asset)


class RateCalculator:
    """Builds quotes with the configured fee structure.

    Args:
        fee_settings: Swap fee percentage and flat network fee.
    """

    def __init__(self, fee_settings: FeeSettings) -> None:
        self._fees = fee_settings

    @property
    def fee_pct(self) -> Decimal:
        return self._fees.swap_fee_pct

    @property
    def network_fee_usd(self) -> Decimal:
        return self._fees.network_fee_usd

    def live_rate(self, from_asset: Asset, to_asset: Asset, snapshot: PriceSnapshot) -> Decimal:
        return live_rate(from_asset, to_asset, snapshot)

    def estimated_receive(
        self, send_amount_usd: Any, receive_asset: Asset, snapshot: PriceSnapshot
    ) -> Decimal:
        return estimated_receive(
            send_amount_usd,
            self._fees.swap_fee_pct,
            self._fees.network_fee_usd,
            receive_asset,
            snapshot,
        )

    def quote(self, selection: Selection, snapshot: PriceSnapshot) -> Quote:
        """Compute every derived value for a selection in one pass."""
        amount = sanitize_amount(selection.send_amount_usd)
        after_fees = usd_after_fees(amount, self._fees.swap_fee_pct, self._fees.network_fee_usd)
        return Quote(
            from_asset=selection.from_asset,
            to_asset=selection.to_asset,
            receive_asset=selection.receive_asset,
            live_rate=live_rate(selection.from_asset, selection.to_asset, snapshot),
            send_amount_usd=amount,
            swap_fee_usd=amount * self._fees.swap_fee_pct,
            network_fee_usd=self._fees.network_fee_usd,
            usd_after_fees=after_fees,
            estimated_receive=after_fees / snapshot.price(selection.receive_asset),
            snapshot_source=snapshot.source,
            captured_at=snapshot.captured_at,
        )
