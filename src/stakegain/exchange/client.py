"""Abstract candle client interface.

Defines the contract the candle fetcher needs from an exchange. Fetching
code depends only on this interface, keeping ccxt details isolated in the
concrete implementation.
"""

from abc import ABC, abstractmethod


class CandleClient(ABC):
    """Abstract base class for public market data clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...

    @abstractmethod
    async def fetch_ohlcv(
        self,
        symbol: str,
        timeframe: str = "1m",
        since: int | None = None,
        limit: int = 1000,
        params: dict | None = None,
    ) -> list[list]:
        """Fetch OHLCV candle data in ascending time order.

        Returns list of [timestamp_ms, open, high, low, close, volume].

        Pagination is NOT handled here -- callers are responsible for
        iterating with appropriate since parameters.
        """
        ...

    @abstractmethod
    def timeframe_duration_ms(self, timeframe: str) -> int:
        """Length of one candle of the given timeframe in milliseconds."""
        ...
