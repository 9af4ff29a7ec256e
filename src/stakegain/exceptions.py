"""Custom exceptions for staking income reports.

Core errors (series, range, ordering, missing prices) and collaborator
errors (ledger parsing, price fetching) live here to avoid circular
imports between modules.
"""

from datetime import datetime


class StakeGainError(Exception):
    """Base exception for all stakegain errors."""


class MalformedSeriesError(StakeGainError):
    """Raised when candle input is not strictly ascending and non-overlapping."""

    def __init__(self, index: int, reason: str) -> None:
        self.index = index
        self.reason = reason
        super().__init__(f"malformed candle series at index {index}: {reason}")


class NoPriceDataError(StakeGainError):
    """Raised when no usable candle exists for a timestamp."""

    def __init__(self, timestamp: datetime, reason: str = "price series is empty") -> None:
        self.timestamp = timestamp
        self.reason = reason
        super().__init__(f"no price data for {timestamp.isoformat()}: {reason}")


class InvalidRangeError(StakeGainError):
    """Raised when a date range begins after it ends."""

    def __init__(self, begin: object, end: object) -> None:
        self.begin = begin
        self.end = end
        super().__init__(f"range begin {begin} is after end {end}")


class UnorderedEventsError(StakeGainError):
    """Raised when events are not in non-decreasing timestamp order."""

    def __init__(self, index: int, previous: datetime, current: datetime) -> None:
        self.index = index
        self.previous = previous
        self.current = current
        super().__init__(
            f"event {index} at {current.isoformat()} precedes "
            f"previous event at {previous.isoformat()}"
        )


class LedgerFormatError(StakeGainError):
    """Raised when the reward ledger file cannot be parsed."""

    def __init__(self, line: int, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"ledger line {line}: {reason}")


class PriceFetchError(StakeGainError):
    """Raised when candle data cannot be fetched from the exchange."""


class ConfigurationError(StakeGainError, ValueError):
    """Raised when a setting or flag names something the exchange cannot serve."""


class NaiveTimestampError(StakeGainError, ValueError):
    """Raised when an event timestamp carries no timezone."""

    def __init__(self, timestamp: datetime) -> None:
        self.timestamp = timestamp
        super().__init__(f"event timestamp {timestamp.isoformat()} has no timezone")
