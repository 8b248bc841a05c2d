"""Pure pricing functions: live exchange rate and fee-adjusted receive estimate."""

from ratefeed.pricing.rate_calculator import (
    RateCalculator,
    estimated_receive,
    live_rate,
    sanitize_amount,
)

__all__ = ["RateCalculator", "estimated_receive", "live_rate", "sanitize_amount"]
