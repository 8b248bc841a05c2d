"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSettings(BaseSettings):
    """Price feed polling and simulation fallback settings.

    The simulator only runs when the feed is unreachable; its snapshots are
    tagged ``simulated`` and must never be treated as market data.
    """

    model_config = SettingsConfigDict(env_prefix="FEED_")

    base_url: str = "https://api.coingecko.com/api/v3/simple/price"
    poll_interval: float = 30.0  # seconds between ticks
    request_timeout: float = 10.0  # must stay below poll_interval
    drift: Decimal = Decimal("0.001")  # +/-0.1% per simulated tick
    price_floor: Decimal = Decimal("0.0001")
    stale_after: float = 90.0  # seconds before the dashboard flags a snapshot


class FeeSettings(BaseSettings):
    """Swap fee structure shown in the conversion calculator."""

    model_config = SettingsConfigDict(env_prefix="FEES_")

    swap_fee_pct: Decimal = Decimal("0.005")  # 0.5%
    network_fee_usd: Decimal = Decimal("1.25")


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    enabled: bool = True
    update_interval: int = 5  # seconds between WebSocket pushes


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    feed: FeedSettings = FeedSettings()
    fees: FeeSettings = FeeSettings()
    dashboard: DashboardSettings = DashboardSettings()
