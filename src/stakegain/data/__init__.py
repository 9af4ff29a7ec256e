"""Historical candle data fetching."""

from stakegain.data.fetcher import HistoricalCandleFetcher

__all__ = ["HistoricalCandleFetcher"]
