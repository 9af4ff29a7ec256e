"""CSV rendering of income reports.

Layout: a header row, one row per reward, then a TOTAL row carrying the
summed amount, the amount-weighted average price and the summed fiat value.
Decimals are written in plain notation without trailing zeros.
"""

import csv
from decimal import ROUND_HALF_EVEN, Decimal
from pathlib import Path
from typing import TextIO

from stakegain.logging import get_logger
from stakegain.models import Report
from stakegain.timeutil import format_utc_datetime

logger = get_logger(__name__)

DATE_COLUMN = "Date"
VALUE_COLUMN = "Value"
FIAT_INCOME_COLUMN = "Fiat income"
TOTAL_ROW = "TOTAL"


def format_decimal(value: Decimal) -> str:
    """Plain-notation string with trailing fractional zeros removed."""
    normalized = value.normalize()
    if normalized.is_zero():
        return "0"
    return format(normalized, "f")


def decimal_places(value: Decimal) -> int:
    """Number of fractional digits in the normalized value."""
    exponent = value.normalize().as_tuple().exponent
    return max(0, -exponent) if isinstance(exponent, int) else 0


def render_report(
    report: Report,
    symbol: str,
    out: TextIO,
    average_price_min_decimals: int = 8,
) -> None:
    """Write report as CSV to an open text stream.

    The average price is rounded to as many fractional digits as the
    longer of the two totals, and never fewer than
    average_price_min_decimals.
    """
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow([DATE_COLUMN, VALUE_COLUMN, symbol, FIAT_INCOME_COLUMN])

    for row in report.rows:
        writer.writerow(
            [
                format_utc_datetime(row.event.timestamp),
                format_decimal(row.event.amount),
                format_decimal(row.price),
                format_decimal(row.fiat_gain),
            ]
        )

    total = report.total_row
    places = max(
        decimal_places(total.amount),
        decimal_places(total.fiat_gain),
        average_price_min_decimals,
    )
    average_price = total.average_price.quantize(
        Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN
    )
    writer.writerow(
        [
            TOTAL_ROW,
            format_decimal(total.amount),
            format_decimal(average_price),
            format_decimal(total.fiat_gain),
        ]
    )


def write_report(
    report: Report,
    symbol: str,
    path: str | Path,
    average_price_min_decimals: int = 8,
) -> None:
    """Write report as CSV to path, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        render_report(report, symbol, f, average_price_min_decimals)

    logger.info("report_written", path=str(path), rows=len(report.rows))
