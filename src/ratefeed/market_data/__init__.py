"""Market data layer -- price feed polling, simulation fallback, and the shared price cell."""

from ratefeed.market_data.feed_poller import FeedPoller, PollerState
from ratefeed.market_data.price_feed import CoinGeckoFeed, PriceFeed
from ratefeed.market_data.price_source import PriceSource

__all__ = ["CoinGeckoFeed", "FeedPoller", "PollerState", "PriceFeed", "PriceSource"]
