"""Data models for reward events, candles and income reports.

CRITICAL: All monetary values use Decimal. Never use float for prices,
amounts or fiat values -- the report total must equal the sum of its rows.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from stakegain.exceptions import NaiveTimestampError


@dataclass(frozen=True)
class Event:
    """A single staking reward: amount received at a UTC instant."""

    timestamp: datetime
    amount: Decimal

    def __post_init__(self) -> None:
        if self.timestamp.tzinfo is None:
            raise NaiveTimestampError(self.timestamp)


@dataclass(frozen=True)
class Candle:
    """One fixed-duration bucket of a historical price series.

    Covers the half-open interval [interval_start, interval_start + interval).
    """

    interval_start: datetime
    interval: timedelta
    close: Decimal

    @property
    def interval_end(self) -> datetime:
        return self.interval_start + self.interval

    def contains(self, timestamp: datetime) -> bool:
        return self.interval_start <= timestamp < self.interval_end


@dataclass(frozen=True)
class ReportRow:
    """An event annotated with its price and fiat value."""

    event: Event
    price: Decimal
    fiat_gain: Decimal


@dataclass(frozen=True)
class RunningTotals:
    """Accumulated amount and fiat value over the rows processed so far."""

    amount: Decimal = Decimal("0")
    fiat_gain: Decimal = Decimal("0")

    def add(self, row: ReportRow) -> RunningTotals:
        return RunningTotals(
            amount=self.amount + row.event.amount,
            fiat_gain=self.fiat_gain + row.fiat_gain,
        )


@dataclass(frozen=True)
class TotalRow:
    """Synthetic summary row appended after the report rows.

    average_price is the amount-weighted price: total fiat / total amount,
    or zero when nothing was received.
    """

    amount: Decimal
    average_price: Decimal
    fiat_gain: Decimal


@dataclass(frozen=True)
class Report:
    """Price-annotated, range-filtered reward rows plus their totals."""

    rows: tuple[ReportRow, ...]
    total_amount: Decimal
    total_fiat_gain: Decimal

    @property
    def total_row(self) -> TotalRow:
        if self.total_amount.is_zero():
            average_price = Decimal("0")
        else:
            average_price = self.total_fiat_gain / self.total_amount
        return TotalRow(
            amount=self.total_amount,
            average_price=average_price,
            fiat_gain=self.total_fiat_gain,
        )

    def __len__(self) -> int:
        return len(self.rows)
