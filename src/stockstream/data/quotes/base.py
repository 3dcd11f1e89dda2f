"""Quote source interface."""

from typing import Protocol, runtime_checkable

from stockstream.data.models import PriceSeries, TimeRange


@runtime_checkable
class QuoteSource(Protocol):
    """Asynchronous provider of closing prices.

    Implementations return prices sorted by ascending timestamp, return an
    empty series when nothing traded in the range, and raise
    DataUnavailableError for any transport, auth or parse failure.
    """

    async def fetch_closes(self, symbol: str, time_range: TimeRange) -> PriceSeries:
        """Fetch closing prices for symbol within time_range."""
        ...
