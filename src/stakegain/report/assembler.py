"""Report generation: range filter, price lookup, fiat valuation, totals.

A single linear pass over the events. Any event without a usable price
aborts the whole report; a silently incomplete income report is worse
than a loud failure.
"""

from collections.abc import Iterable
from datetime import datetime

from stakegain.logging import get_logger
from stakegain.models import Event, Report, ReportRow
from stakegain.pricing.series import CandleSeries
from stakegain.report.calculator import GainCalculator
from stakegain.report.range_filter import DateRange, filter_range

logger = get_logger(__name__)


class ReportAssembler:
    """Turns reward events into a priced, range-filtered income report.

    The assembler holds no state between calls: every assemble() gets its
    own GainCalculator, so repeated runs on the same inputs produce equal
    reports.

    Args:
        series: Historical prices covering the events.
        decimal_places: Fractional digits kept in each fiat value.
    """

    def __init__(self, series: CandleSeries, decimal_places: int = 8) -> None:
        self._series = series
        self._decimal_places = decimal_places

    def assemble(
        self,
        events: Iterable[Event],
        begin: datetime | None = None,
        end: datetime | None = None,
    ) -> Report:
        """Build the report for the events inside [begin, end).

        Args:
            events: Rewards in non-decreasing timestamp order.
            begin: Inclusive lower bound, or None for unbounded.
            end: Exclusive upper bound, or None for unbounded.

        Returns:
            Report with one row per selected event and the summed totals.

        Raises:
            InvalidRangeError: begin is after end.
            UnorderedEventsError: events are out of order.
            NoPriceDataError: no price is available for some event.
        """
        date_range = DateRange(begin=begin, end=end)
        calculator = GainCalculator(self._decimal_places)
        rows: list[ReportRow] = []

        for event in filter_range(events, date_range):
            price = self._series.price_at(event.timestamp)
            rows.append(calculator.apply(event, price))

        totals = calculator.totals
        logger.info(
            "report_assembled",
            rows=len(rows),
            begin=begin.isoformat() if begin else None,
            end=end.isoformat() if end else None,
            total_amount=str(totals.amount),
            total_fiat_gain=str(totals.fiat_gain),
        )

        return Report(
            rows=tuple(rows),
            total_amount=totals.amount,
            total_fiat_gain=totals.fiat_gain,
        )
