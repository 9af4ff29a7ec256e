"""Historical candle fetch pipeline with batching, retry and progress logging.

Fetches only the candle buckets that contain reward timestamps. Consecutive
buckets are covered by a single request of up to batch_limit candles, so a
dense daily ledger costs one call per batch_limit days while a sparse one
costs one call per reward.

CRITICAL implementation notes:
- Klines are requested forward from `since` (inclusive), ascending order
- A batch shorter than the limit means the exchange has no later data
- Network and rate limit errors are retried with exponential backoff;
  any other exchange error (bad symbol, bad timeframe) fails immediately
"""

import asyncio
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from decimal import Decimal

import ccxt.async_support

from stakegain.config import FetchSettings
from stakegain.exceptions import ConfigurationError, NoPriceDataError, PriceFetchError
from stakegain.exchange.client import CandleClient
from stakegain.logging import get_logger
from stakegain.pricing.series import CandleSeries
from stakegain.timeutil import format_utc_datetime, from_millis, to_millis

logger = get_logger(__name__)

MINUTE_MS = 60_000


class HistoricalCandleFetcher:
    """Fetches candles from an exchange and builds a CandleSeries.

    Usage:
        fetcher = HistoricalCandleFetcher(client, settings)
        series = await fetcher.fetch_series("DOT/EUR", "1d", timestamps)
    """

    def __init__(self, client: CandleClient, settings: FetchSettings) -> None:
        self._client = client
        self._settings = settings

    # ──────────────────────────────────────────────
    # Public methods
    # ──────────────────────────────────────────────

    async def connect(self) -> None:
        """Connect the client, retrying network failures like any fetch.

        Raises:
            PriceFetchError: The exchange stayed unreachable or refused the
                connection.
        """
        await self._fetch_with_retry(self._client.connect)

    async def fetch_series(
        self,
        symbol: str,
        timeframe: str,
        timestamps: Iterable[datetime],
    ) -> CandleSeries:
        """Fetch the candles whose buckets contain the given timestamps.

        Args:
            symbol: ccxt unified symbol, e.g. "DOT/EUR".
            timeframe: ccxt timeframe, e.g. "1m", "1h", "1d".
            timestamps: Instants that need a price.

        Returns:
            CandleSeries over every candle returned by the exchange.

        Raises:
            ConfigurationError: The exchange does not know the timeframe.
            PriceFetchError: The exchange rejected the request or kept
                failing after max_retries attempts.
        """
        try:
            duration_ms = self._client.timeframe_duration_ms(timeframe)
        except (ccxt.async_support.BaseError, ValueError) as e:
            raise ConfigurationError(f"unsupported timeframe {timeframe!r}: {e}") from e
        limit = self._settings.batch_limit
        buckets = sorted({to_millis(ts) // duration_ms * duration_ms for ts in timestamps})

        start_time = time.monotonic()
        rows: dict[int, list] = {}
        requests = 0
        i = 0

        while i < len(buckets):
            since = buckets[i]
            batch = await self._fetch_with_retry(
                self._client.fetch_ohlcv,
                symbol,
                timeframe=timeframe,
                since=since,
                limit=limit,
            )
            requests += 1

            for row in batch:
                rows[int(row[0])] = row

            if len(batch) < limit:
                # No data beyond the last returned candle
                break

            covered_until = int(batch[-1][0]) + duration_ms
            while i < len(buckets) and buckets[i] < covered_until:
                i += 1

            logger.debug(
                "candle_fetch_progress",
                symbol=symbol,
                progress=f"{i}/{len(buckets)}",
                candles=len(rows),
            )

            if i < len(buckets):
                # Rate limit safety delay between paginated calls
                await asyncio.sleep(self._settings.batch_delay)

        series = CandleSeries.from_ohlcv(
            (rows[ts] for ts in sorted(rows)),
            timedelta(milliseconds=duration_ms),
        )

        logger.info(
            "candles_ready",
            symbol=symbol,
            timeframe=timeframe,
            buckets=len(buckets),
            candles=len(series),
            requests=requests,
            duration_seconds=round(time.monotonic() - start_time, 1),
        )
        return series

    async def fetch_minute_close(self, symbol: str, when: datetime) -> Decimal:
        """Close price of the one-minute candle containing when.

        The time is rounded down to the minute; the exchange must return
        exactly that candle, otherwise the nearest later one would be
        reported as if it were the requested minute.

        Raises:
            NoPriceDataError: No candle exists for that minute.
            PriceFetchError: The exchange request failed.
        """
        start_ms = to_millis(when) // MINUTE_MS * MINUTE_MS

        batch = await self._fetch_with_retry(
            self._client.fetch_ohlcv,
            symbol,
            timeframe="1m",
            since=start_ms,
            limit=1,
        )
        if not batch:
            raise NoPriceDataError(when, "exchange returned no candles")

        returned_ms = int(batch[0][0])
        if returned_ms != start_ms:
            raise NoPriceDataError(
                when,
                f"returned candle {returned_ms} ({format_utc_datetime(from_millis(returned_ms))} UTC) "
                f"doesn't match requested {start_ms} "
                f"({format_utc_datetime(from_millis(start_ms))} UTC)",
            )

        return Decimal(str(batch[0][4]))

    # ──────────────────────────────────────────────
    # Retry wrapper
    # ──────────────────────────────────────────────

    async def _fetch_with_retry(self, fetch_fn: Callable, *args, **kwargs):
        """Execute a fetch function with exponential backoff retry.

        Retries network failures up to max_retries times with delays of
        base, 2*base, 4*base... Rate limit errors wait three times longer.
        Other exchange errors are not retried.
        """
        max_retries = self._settings.max_retries
        base_delay = self._settings.retry_base_delay

        for attempt in range(max_retries):
            try:
                return await fetch_fn(*args, **kwargs)
            except ccxt.async_support.NetworkError as e:
                if attempt == max_retries - 1:
                    logger.error(
                        "fetch_failed_permanently",
                        error=str(e),
                        attempts=max_retries,
                    )
                    raise PriceFetchError(
                        f"exchange request failed after {max_retries} attempts: {e}"
                    ) from e

                delay = base_delay * (2**attempt)

                if isinstance(e, ccxt.async_support.RateLimitExceeded):
                    delay *= 3
                    logger.warning(
                        "rate_limit_exceeded",
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay=delay,
                    )
                else:
                    logger.warning(
                        "fetch_retry",
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        delay=delay,
                        error=str(e),
                    )

                await asyncio.sleep(delay)
            except ccxt.async_support.BaseError as e:
                logger.error("fetch_rejected", error=str(e))
                raise PriceFetchError(f"exchange request rejected: {e}") from e

        raise PriceFetchError("exchange request not attempted: max_retries is 0")
