"""Shared test fixtures for stakegain."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stakegain.config import AppSettings, FetchSettings, ReportSettings
from stakegain.models import Event
from stakegain.pricing.series import CandleSeries

DAY = timedelta(days=1)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (no fetch delays)."""
    return AppSettings(
        log_level="DEBUG",
        fetch=FetchSettings(
            max_retries=3,
            retry_base_delay=0.0,
            batch_delay=0.0,
            batch_limit=1000,
        ),
        report=ReportSettings(symbol="DOT/EUR", timeframe="1d"),
    )


@pytest.fixture
def daily_series() -> Callable[..., CandleSeries]:
    """Factory: daily CandleSeries from (YYYY, MM, DD, close) tuples."""

    def _build(*days: tuple[int, int, int, str]) -> CandleSeries:
        return CandleSeries(
            [(utc(y, m, d), Decimal(close)) for y, m, d, close in days],
            DAY,
        )

    return _build


@pytest.fixture
def reward_events() -> list[Event]:
    """Two rewards one day apart (early January 2022)."""
    return [
        Event(timestamp=utc(2022, 1, 1, 1, 57, 3), amount=Decimal("0.532")),
        Event(timestamp=utc(2022, 1, 2, 1, 56, 56), amount=Decimal("0.5214")),
    ]
