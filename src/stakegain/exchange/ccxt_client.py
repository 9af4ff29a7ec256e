"""Candle client implementation via ccxt async.

Wraps a ccxt.async_support exchange (Binance by default) for public kline
data only; no API keys are needed or sent.
"""

import ccxt.async_support as ccxt_async

from stakegain.config import ExchangeSettings
from stakegain.exceptions import ConfigurationError
from stakegain.exchange.client import CandleClient
from stakegain.logging import get_logger

logger = get_logger(__name__)


class CcxtClient(CandleClient):
    """Concrete candle client using a ccxt async exchange class."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings

        exchange_class = getattr(ccxt_async, settings.name, None)
        if exchange_class is None:
            raise ConfigurationError(f"Unknown ccxt exchange: {settings.name}")

        self._exchange = exchange_class(
            {
                "enableRateLimit": True,
                "timeout": settings.timeout_ms,
            }
        )

    @property
    def exchange(self) -> ccxt_async.Exchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        """Initialize connection by loading markets."""
        logger.info("connecting_to_exchange", exchange=self._settings.name)
        markets = await self._exchange.load_markets()
        logger.info(
            "exchange_connected",
            exchange=self._settings.name,
            market_count=len(markets),
        )

    async def close(self) -> None:
        """Clean up ccxt async resources. CRITICAL: must be called to avoid resource leaks."""
        await self._exchange.close()
        logger.debug("exchange_connection_closed", exchange=self._settings.name)

    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int = 1000,
        params: dict | None = None,
    ) -> list[list]:
        """Fetch OHLCV candles starting at since (inclusive)."""
        return await self._exchange.fetch_ohlcv(
            symbol, timeframe=timeframe, since=since, limit=limit, params=params or {}
        )

    def timeframe_duration_ms(self, timeframe: str) -> int:
        """Length of one candle in milliseconds, using ccxt's timeframe parser."""
        return int(self._exchange.parse_timeframe(timeframe)) * 1000
