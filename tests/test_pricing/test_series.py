"""Tests for CandleSeries price lookup.

Tests verify:
- Exact lookup inside a candle interval (start inclusive, end exclusive)
- Nearest fallback before the first and after the last candle
- Gap resolution by edge distance, preceding candle wins ties
- Construction rejects unordered, duplicate, overlapping and naive input
- Empty series raises NoPriceDataError with the timestamp
- from_ohlcv builds from ccxt rows using the close column
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stakegain.exceptions import MalformedSeriesError, NoPriceDataError
from stakegain.pricing.series import CandleSeries

DAY = timedelta(days=1)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def contiguous() -> CandleSeries:
    """Five contiguous daily candles, 2022-01-01 .. 2022-01-05."""
    return CandleSeries(
        [(utc(2022, 1, d), Decimal(f"{20 + d}.5")) for d in range(1, 6)],
        DAY,
    )


class TestExactLookup:
    def test_inside_interval(self, contiguous: CandleSeries) -> None:
        assert contiguous.price_at(utc(2022, 1, 3, 13, 45)) == Decimal("23.5")

    def test_interval_start_is_inclusive(self, contiguous: CandleSeries) -> None:
        assert contiguous.price_at(utc(2022, 1, 2)) == Decimal("22.5")

    def test_interval_end_belongs_to_next_candle(self, contiguous: CandleSeries) -> None:
        just_before = utc(2022, 1, 3) - timedelta(microseconds=1)
        assert contiguous.price_at(just_before) == Decimal("22.5")
        assert contiguous.price_at(utc(2022, 1, 3)) == Decimal("23.5")

    def test_covers(self, contiguous: CandleSeries) -> None:
        assert contiguous.covers(utc(2022, 1, 5, 23, 59))
        assert not contiguous.covers(utc(2022, 1, 6))
        assert not contiguous.covers(utc(2021, 12, 31, 23, 59))


class TestNearestFallback:
    def test_before_first_candle(self, contiguous: CandleSeries) -> None:
        assert contiguous.price_at(utc(2021, 6, 1)) == Decimal("21.5")

    def test_after_last_candle(self, contiguous: CandleSeries) -> None:
        assert contiguous.price_at(utc(2023, 1, 1)) == Decimal("25.5")

    def test_single_candle_answers_everything(self) -> None:
        series = CandleSeries([(utc(2022, 1, 1), Decimal("10"))], DAY)
        assert series.price_at(utc(2000, 1, 1)) == Decimal("10")
        assert series.price_at(utc(2022, 1, 1, 12)) == Decimal("10")
        assert series.price_at(utc(2099, 1, 1)) == Decimal("10")


class TestGapHandling:
    @pytest.fixture
    def gapped(self) -> CandleSeries:
        """Daily candles with 2022-01-03 removed."""
        return CandleSeries(
            [
                (utc(2022, 1, 1), Decimal("21")),
                (utc(2022, 1, 2), Decimal("22")),
                (utc(2022, 1, 4), Decimal("24")),
                (utc(2022, 1, 5), Decimal("25")),
            ],
            DAY,
        )

    def test_early_in_gap_resolves_to_preceding(self, gapped: CandleSeries) -> None:
        assert gapped.price_at(utc(2022, 1, 3, 2)) == Decimal("22")

    def test_late_in_gap_resolves_to_following(self, gapped: CandleSeries) -> None:
        assert gapped.price_at(utc(2022, 1, 3, 22)) == Decimal("24")

    def test_midpoint_tie_prefers_preceding(self, gapped: CandleSeries) -> None:
        assert gapped.price_at(utc(2022, 1, 3, 12)) == Decimal("22")

    def test_just_after_midpoint_goes_forward(self, gapped: CandleSeries) -> None:
        assert gapped.price_at(utc(2022, 1, 3, 12, 0, 1)) == Decimal("24")

    def test_start_of_gap_is_not_covered(self, gapped: CandleSeries) -> None:
        assert not gapped.covers(utc(2022, 1, 3))
        assert gapped.candle_at(utc(2022, 1, 3)).interval_start == utc(2022, 1, 2)


class TestConstruction:
    def test_duplicate_open_time_rejected(self) -> None:
        with pytest.raises(MalformedSeriesError) as exc_info:
            CandleSeries(
                [
                    (utc(2022, 1, 1), Decimal("1")),
                    (utc(2022, 1, 2), Decimal("2")),
                    (utc(2022, 1, 2), Decimal("3")),
                ],
                DAY,
            )
        assert exc_info.value.index == 2

    def test_descending_rejected(self) -> None:
        with pytest.raises(MalformedSeriesError) as exc_info:
            CandleSeries(
                [(utc(2022, 1, 2), Decimal("2")), (utc(2022, 1, 1), Decimal("1"))],
                DAY,
            )
        assert exc_info.value.index == 1

    def test_overlapping_intervals_rejected(self) -> None:
        with pytest.raises(MalformedSeriesError, match="overlaps"):
            CandleSeries(
                [(utc(2022, 1, 1), Decimal("1")), (utc(2022, 1, 1, 12), Decimal("2"))],
                DAY,
            )

    def test_naive_open_time_rejected(self) -> None:
        with pytest.raises(MalformedSeriesError, match="timezone"):
            CandleSeries([(datetime(2022, 1, 1), Decimal("1"))], DAY)

    def test_non_positive_interval_rejected(self) -> None:
        with pytest.raises(ValueError):
            CandleSeries([], timedelta(0))

    def test_first_last_and_len(self, contiguous: CandleSeries) -> None:
        assert len(contiguous) == 5
        assert contiguous.first is not None
        assert contiguous.first.interval_start == utc(2022, 1, 1)
        assert contiguous.last is not None
        assert contiguous.last.interval_end == utc(2022, 1, 6)
        assert [c.close for c in contiguous][:2] == [Decimal("21.5"), Decimal("22.5")]


class TestEmptySeries:
    def test_price_at_raises_with_timestamp(self) -> None:
        series = CandleSeries([], DAY)
        when = utc(2022, 1, 1, 1, 57, 3)
        with pytest.raises(NoPriceDataError) as exc_info:
            series.price_at(when)
        assert exc_info.value.timestamp == when
        assert series.first is None
        assert len(series) == 0


class TestFromOhlcv:
    def test_uses_close_column(self) -> None:
        rows = [
            [1640995200000, 24.1, 24.9, 23.0, 23.93, 1000.0],
            [1641081600000, 23.9, 25.2, 23.5, 24.79, 1500.0],
        ]
        series = CandleSeries.from_ohlcv(rows, DAY)

        assert series.price_at(utc(2022, 1, 1, 1, 57, 3)) == Decimal("23.93")
        assert series.price_at(utc(2022, 1, 2, 1, 56, 56)) == Decimal("24.79")
        assert series.first is not None
        assert series.first.interval_start == utc(2022, 1, 1)
