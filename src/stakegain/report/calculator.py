"""Fiat value computation for priced reward events.

All calculations use Decimal arithmetic exclusively -- no float conversions
anywhere. Each fiat value is rounded to a fixed number of fractional digits
before it enters the running totals, so the report total is exactly the sum
of the printed rows.
"""

from decimal import ROUND_HALF_UP, Decimal

from stakegain.models import Event, ReportRow, RunningTotals


class GainCalculator:
    """Prices events and threads the running totals of one report.

    Args:
        decimal_places: Fractional digits kept in each fiat value
            (8 suits crypto-quoted pairs, 2 suits fiat).
    """

    def __init__(self, decimal_places: int = 8) -> None:
        if decimal_places < 0:
            raise ValueError(f"decimal_places must be >= 0, got {decimal_places}")
        self._quantum = Decimal(1).scaleb(-decimal_places)
        self._totals = RunningTotals()

    @property
    def totals(self) -> RunningTotals:
        return self._totals

    def fiat_value(self, amount: Decimal, price: Decimal) -> Decimal:
        """amount * price rounded half-up to the configured precision."""
        return (amount * price).quantize(self._quantum, rounding=ROUND_HALF_UP)

    def apply(self, event: Event, price: Decimal) -> ReportRow:
        """Build the row for event at price and add it to the totals."""
        row = ReportRow(
            event=event,
            price=price,
            fiat_gain=self.fiat_value(event.amount, price),
        )
        self._totals = self._totals.add(row)
        return row

    def reset(self) -> None:
        self._totals = RunningTotals()
