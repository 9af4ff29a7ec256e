"""Staking reward ledger reader (Subscan CSV export).

Only the 'Date' and 'Value' columns are used; any other columns are
ignored. Rows are returned sorted by timestamp (stable, so equal
timestamps keep file order) because reward exports are commonly listed
newest first and the report pipeline requires chronological input.
"""

import csv
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import TextIO

from stakegain.exceptions import LedgerFormatError
from stakegain.logging import get_logger
from stakegain.models import Event
from stakegain.timeutil import parse_utc_datetime

logger = get_logger(__name__)

DATE_COLUMN = "Date"
VALUE_COLUMN = "Value"


def parse_ledger(source: TextIO) -> list[Event]:
    """Parse reward events from an open CSV text stream.

    Raises:
        LedgerFormatError: Missing columns, short rows, unparseable or
            negative values. The error names the 1-based file line.
    """
    reader = csv.reader(source)
    try:
        headers = [column.strip() for column in next(reader)]
    except StopIteration:
        raise LedgerFormatError(1, "file is empty") from None

    try:
        date_column = headers.index(DATE_COLUMN)
    except ValueError:
        raise LedgerFormatError(1, f"no '{DATE_COLUMN}' column found") from None
    try:
        value_column = headers.index(VALUE_COLUMN)
    except ValueError:
        raise LedgerFormatError(1, f"no '{VALUE_COLUMN}' column found") from None
    min_columns = max(date_column, value_column) + 1

    events: list[Event] = []
    for record in reader:
        line = reader.line_num
        if not record or all(not cell.strip() for cell in record):
            continue
        if len(record) < min_columns:
            raise LedgerFormatError(line, "not enough columns in row")

        try:
            timestamp = parse_utc_datetime(record[date_column])
        except ValueError as e:
            raise LedgerFormatError(line, str(e)) from e

        value_str = record[value_column].strip()
        try:
            amount = Decimal(value_str)
        except InvalidOperation:
            raise LedgerFormatError(line, f"cannot convert '{value_str}' to number") from None
        if not amount.is_finite():
            raise LedgerFormatError(line, f"cannot convert '{value_str}' to number")
        if amount < 0:
            raise LedgerFormatError(line, f"negative reward amount {value_str}")

        events.append(Event(timestamp=timestamp, amount=amount))

    in_order = all(a.timestamp <= b.timestamp for a, b in zip(events, events[1:]))
    if not in_order:
        events.sort(key=lambda event: event.timestamp)
        logger.debug("ledger_sorted_by_timestamp", events=len(events))

    return events


def read_ledger(path: str | Path) -> list[Event]:
    """Read reward events from a CSV file on disk."""
    path = Path(path)
    with path.open(newline="", encoding="utf-8-sig") as f:
        events = parse_ledger(f)

    logger.info("ledger_loaded", path=str(path), events=len(events))
    return events
