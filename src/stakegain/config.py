"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Exchange connection settings (public market data only)."""

    model_config = SettingsConfigDict(env_prefix="EXCHANGE_")

    name: str = "binance"
    timeout_ms: int = 10_000


class FetchSettings(BaseSettings):
    """Historical candle fetching behaviour.

    Controls batch size, retry policy and pacing between paginated calls.
    All fields configurable via FETCH_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="FETCH_")

    max_retries: int = 5
    retry_base_delay: float = 1.0
    batch_delay: float = 0.1
    batch_limit: int = 1000  # Binance kline max per call


class ReportSettings(BaseSettings):
    """Report generation parameters."""

    model_config = SettingsConfigDict(env_prefix="REPORT_")

    symbol: str = "DOT/EUR"
    timeframe: str = "1m"
    decimal_places: int = 8
    average_price_min_decimals: int = 8


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    exchange: ExchangeSettings = ExchangeSettings()
    fetch: FetchSettings = FetchSettings()
    report: ReportSettings = ReportSettings()
