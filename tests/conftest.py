"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

import pytest

from stockstream.data.models import PriceSeries, TimeRange
from stockstream.utils.errors import DataUnavailableError


class FakeQuoteSource:
    """In-memory quote source with scripted failures and delays."""

    def __init__(
        self,
        series: dict[str, list[float]] | None = None,
        failing: set[str] | None = None,
        hanging: set[str] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.series = series or {}
        self.failing = failing or set()
        self.hanging = hanging or set()
        self.delay = delay
        self.calls: list[tuple[str, TimeRange]] = []

    async def fetch_closes(self, symbol: str, time_range: TimeRange) -> PriceSeries:
        self.calls.append((symbol, time_range))
        if self.delay:
            await asyncio.sleep(self.delay)
        if symbol in self.hanging:
            await asyncio.Event().wait()
        if symbol in self.failing:
            raise DataUnavailableError(f"No data for {symbol}", symbol=symbol)
        return list(self.series.get(symbol, []))


@pytest.fixture
def make_source() -> Callable[..., FakeQuoteSource]:
    """Factory for fake quote sources."""
    return FakeQuoteSource


@pytest.fixture
def period() -> TimeRange:
    """A fixed one-month query window."""
    return TimeRange(
        start=datetime(2024, 1, 1, tzinfo=UTC),
        end=datetime(2024, 2, 1, tzinfo=UTC),
    )
