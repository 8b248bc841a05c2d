"""Public simple-price feed client.

One outbound GET per tick for the USD price of every tracked asset. Any
deviation from the expected response shape is reported as
FeedUnavailableError; the poller decides what to do about it.
"""

import asyncio
import ssl
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any

import aiohttp
import certifi

from ratefeed.config import FeedSettings
from ratefeed.exceptions import FeedUnavailableError
from ratefeed.logging import get_logger
from ratefeed.models import Asset

logger = get_logger(__name__)


class PriceFeed(ABC):
    """Abstract base class for USD price providers."""

    @abstractmethod
    async def fetch_prices(self) -> dict[Asset, Decimal]:
        """Return the USD price of every tracked asset.

        Raises:
            FeedUnavailableError: On network failure, non-OK status or a
                malformed payload.
        """
        ...


def parse_simple_price(payload: Any) -> dict[Asset, Decimal]:
    """Validate a simple-price payload and extract one price per asset.

    Expects ``{"bitcoin": {"usd": 60000.0}, "ethereum": {...}, "tether": {...}}``.
    Extra keys are ignored; a missing asset, a non-numeric ``usd`` field or a
    non-positive price fails the whole payload.
    """
    if not isinstance(payload, dict):
        raise FeedUnavailableError("payload is not a JSON object")

    prices: dict[Asset, Decimal] = {}
    for asset in Asset:
        entry = payload.get(asset.feed_id)
        if not isinstance(entry, dict):
            raise FeedUnavailableError(f"missing entry for {asset.feed_id}")

        raw = entry.get("usd")
        # bool is an int subclass; JSON true/false is not a price
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise FeedUnavailableError(f"non-numeric usd price for {asset.feed_id}")

        try:
            price = Decimal(str(raw))
        except InvalidOperation:
            raise FeedUnavailableError(f"unparseable usd price for {asset.feed_id}") from None

        if not price.is_finite() or price <= 0:
            raise FeedUnavailableError(f"non-positive usd price for {asset.feed_id}")
        prices[asset] = price

    return prices


class CoinGeckoFeed(PriceFeed):
    """Fetch USD prices from the CoinGecko simple-price endpoint."""

    def __init__(self, settings: FeedSettings) -> None:
        self._url = settings.base_url
        self._timeout = aiohttp.ClientTimeout(total=settings.request_timeout)
        self._params = {
            "ids": ",".join(asset.feed_id for asset in Asset),
            "vs_currencies": "usd",
        }

    async def fetch_prices(self) -> dict[Asset, Decimal]:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)

        try:
            async with aiohttp.ClientSession(
                connector=connector, timeout=self._timeout
            ) as session:
                async with session.get(
                    self._url,
                    params=self._params,
                    headers={"Accept": "application/json", "Cache-Control": "no-cache"},
                ) as response:
                    if response.status != 200:
                        raise FeedUnavailableError(f"HTTP {response.status}")
                    data = await response.json()
        except FeedUnavailableError:
            raise
        except asyncio.TimeoutError:
            raise FeedUnavailableError("request timed out") from None
        except (aiohttp.ClientError, OSError, ValueError) as e:
            raise FeedUnavailableError(f"{type(e).__name__}: {e}") from e

        prices = parse_simple_price(data)
        logger.debug(
            "feed_prices_fetched",
            **{asset.value: str(price) for asset, price in prices.items()},
        )
        return prices
