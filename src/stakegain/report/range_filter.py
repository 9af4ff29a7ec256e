"""Half-open UTC date range filtering of reward events.

Events must arrive in non-decreasing timestamp order; the filter is a
single lazy pass that keeps begin <= timestamp < end and fails fast on
out-of-order input instead of silently re-sorting it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import datetime

from stakegain.exceptions import InvalidRangeError, UnorderedEventsError
from stakegain.models import Event


@dataclass(frozen=True)
class DateRange:
    """Inclusive begin, exclusive end. None means unbounded on that side."""

    begin: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.begin is not None and self.end is not None and self.begin > self.end:
            raise InvalidRangeError(self.begin, self.end)

    def contains(self, timestamp: datetime) -> bool:
        if self.begin is not None and timestamp < self.begin:
            return False
        if self.end is not None and timestamp >= self.end:
            return False
        return True


def filter_range(events: Iterable[Event], date_range: DateRange) -> Iterator[Event]:
    """Yield the events that fall inside date_range, in input order.

    Raises:
        UnorderedEventsError: When an event is earlier than the one before it.
            Raised lazily, at the point the violation is consumed.
    """
    previous: datetime | None = None
    for index, event in enumerate(events):
        if previous is not None and event.timestamp < previous:
            raise UnorderedEventsError(index, previous, event.timestamp)
        previous = event.timestamp

        if date_range.contains(event.timestamp):
            yield event
