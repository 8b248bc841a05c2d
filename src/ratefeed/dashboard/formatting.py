"""Display formatting for dashboard payloads.

Raw Decimal values are always sent alongside these strings; clients that
want their own formatting can ignore them.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_CENT = Decimal("0.01")
_CRYPTO_STEP = Decimal("0.000001")


def decimal_to_str(obj: Any) -> Any:
    """Recursively convert Decimal values to strings for JSON serialization."""
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, dict):
        return {k: decimal_to_str(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [decimal_to_str(item) for item in obj]
    return obj


def format_usd(value: Decimal) -> str:
    """Format as dollars with two decimals, e.g. ``$1,000.00``."""
    quantized = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    if quantized < 0:
        return f"-${-quantized:,.2f}"
    return f"${quantized:,.2f}"


def format_crypto(value: Decimal) -> str:
    """Format a coin quantity with at most six decimals, trailing zeros dropped."""
    quantized = value.quantize(_CRYPTO_STEP, rounding=ROUND_HALF_UP)
    text = f"{quantized:,.6f}"
    return text.rstrip("0").rstrip(".")


def format_rate(value: Decimal) -> str:
    """Format an exchange rate with exactly six decimals."""
    return f"{value.quantize(_CRYPTO_STEP, rounding=ROUND_HALF_UP):.6f}"


def timestamp_to_iso(value: float) -> str:
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()
