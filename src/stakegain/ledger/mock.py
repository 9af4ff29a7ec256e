"""Mock reward ledger generation for smoke testing.

Produces one reward of 1 per day in [begin, end), each at a uniformly
random second of that day, in the same CSV layout the reader expects.
"""

import csv
import random
from collections.abc import Iterator
from datetime import date, datetime, time, timedelta
from typing import TextIO

from stakegain.exceptions import InvalidRangeError
from stakegain.ledger.reader import DATE_COLUMN, VALUE_COLUMN
from stakegain.timeutil import HUMAN_FORMAT

SECONDS_PER_DAY = 24 * 60 * 60


def mock_reward_times(begin: date, end: date, rng: random.Random) -> Iterator[datetime]:
    """Yield one random instant per day from begin up to, not including, end."""
    if begin >= end:
        raise InvalidRangeError(begin, end)

    day = begin
    while day < end:
        offset = timedelta(seconds=rng.randrange(SECONDS_PER_DAY))
        yield datetime.combine(day, time()) + offset
        day += timedelta(days=1)


def write_mock_ledger(begin: date, end: date, out: TextIO, seed: int | None = None) -> int:
    """Write a mock ledger to out and return the number of rewards written."""
    rng = random.Random(seed)
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow([DATE_COLUMN, VALUE_COLUMN])

    count = 0
    for when in mock_reward_times(begin, end, rng):
        writer.writerow([when.strftime(HUMAN_FORMAT), "1"])
        count += 1
    return count
