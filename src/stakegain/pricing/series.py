"""Gap-aware historical price lookup over fixed-duration candles.

A CandleSeries is built once from (open_time, close_price) tuples at a
single granularity and answers "price at time T" queries by binary search
over interval starts. Gaps (buckets with no trades) are permitted; a
timestamp that falls in a gap, or outside the series, resolves to the
nearest candle, with ties going to the preceding one.

CRITICAL: Prices are Decimal. Never use float for prices.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timedelta
from decimal import Decimal

from stakegain.exceptions import MalformedSeriesError, NoPriceDataError
from stakegain.models import Candle
from stakegain.timeutil import from_millis

# Column index of the close price in exchange OHLCV rows
_OHLCV_CLOSE = 4


class CandleSeries:
    """Ordered, non-overlapping candles of one symbol at one granularity.

    Args:
        raw: (open_time, close_price) tuples, strictly ascending by open time.
        interval: Duration covered by every candle (e.g. one day).

    Raises:
        MalformedSeriesError: If open times are naive, duplicated, out of
            order, or closer together than ``interval``.
    """

    def __init__(
        self,
        raw: Iterable[tuple[datetime, Decimal]],
        interval: timedelta,
    ) -> None:
        if interval <= timedelta(0):
            raise ValueError(f"candle interval must be positive, got {interval}")

        self._interval = interval
        self._candles: list[Candle] = []
        self._starts: list[datetime] = []

        for index, (open_time, close) in enumerate(raw):
            if open_time.tzinfo is None:
                raise MalformedSeriesError(index, "open time has no timezone")
            if self._candles:
                previous = self._candles[-1]
                if open_time <= previous.interval_start:
                    raise MalformedSeriesError(
                        index,
                        f"open time {open_time.isoformat()} is not after "
                        f"{previous.interval_start.isoformat()}",
                    )
                if open_time < previous.interval_end:
                    raise MalformedSeriesError(
                        index,
                        f"open time {open_time.isoformat()} overlaps candle "
                        f"ending {previous.interval_end.isoformat()}",
                    )
            candle = Candle(
                interval_start=open_time,
                interval=interval,
                close=Decimal(close),
            )
            self._candles.append(candle)
            self._starts.append(open_time)

    @classmethod
    def from_ohlcv(cls, rows: Iterable[Sequence], interval: timedelta) -> CandleSeries:
        """Build a series from exchange OHLCV rows.

        Rows are [timestamp_ms, open, high, low, close, volume] as returned
        by ccxt. Only the open time and close price are kept; the close is
        converted through str() so float payloads keep their printed digits.
        """
        return cls(
            ((from_millis(int(row[0])), Decimal(str(row[_OHLCV_CLOSE]))) for row in rows),
            interval,
        )

    @property
    def interval(self) -> timedelta:
        return self._interval

    @property
    def first(self) -> Candle | None:
        return self._candles[0] if self._candles else None

    @property
    def last(self) -> Candle | None:
        return self._candles[-1] if self._candles else None

    def __len__(self) -> int:
        return len(self._candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self._candles)

    def covers(self, timestamp: datetime) -> bool:
        """True if some candle's interval contains timestamp exactly."""
        idx = bisect_right(self._starts, timestamp)
        return idx > 0 and self._candles[idx - 1].contains(timestamp)

    def candle_at(self, timestamp: datetime) -> Candle:
        """Return the candle whose price applies at timestamp.

        The candle containing timestamp if any; otherwise the nearest one by
        distance to its interval edge (preceding: timestamp - end, following:
        start - timestamp), preferring the preceding candle on ties.

        Raises:
            NoPriceDataError: If the series is empty.
        """
        if not self._candles:
            raise NoPriceDataError(timestamp)

        idx = bisect_right(self._starts, timestamp)
        preceding = self._candles[idx - 1] if idx > 0 else None
        following = self._candles[idx] if idx < len(self._candles) else None

        if preceding is None:
            return following  # type: ignore[return-value]
        if preceding.contains(timestamp) or following is None:
            return preceding

        # Timestamp is in a gap between two candles
        distance_back = timestamp - preceding.interval_end
        distance_forward = following.interval_start - timestamp
        return preceding if distance_back <= distance_forward else following

    def price_at(self, timestamp: datetime) -> Decimal:
        """Close price applicable at timestamp (see candle_at)."""
        return self.candle_at(timestamp).close
