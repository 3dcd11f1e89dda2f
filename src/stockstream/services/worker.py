"""Per-symbol fetch and summarize worker."""

import asyncio

from stockstream.core.signals.summary import DEFAULT_WINDOW_SIZE, summarize
from stockstream.data.models import ResultRecord, TimeRange
from stockstream.data.quotes.base import QuoteSource
from stockstream.data.sink import ResultSink
from stockstream.utils.errors import FetchError, SinkClosedError
from stockstream.utils.logging import get_logger

logger = get_logger(__name__)


class SymbolWorker:
    """Fetches one symbol's series, summarizes it and publishes the result.

    Failures are isolated: a failed fetch or an empty series ends the run
    for that symbol without a record and without touching other symbols.
    """

    def __init__(
        self,
        source: QuoteSource,
        sink: ResultSink,
        window_size: int = DEFAULT_WINDOW_SIZE,
        fetch_timeout: float | None = None,
    ) -> None:
        """Initialize the worker.

        Args:
            source: Quote source to fetch from.
            sink: Sink receiving result records.
            window_size: Moving-average window.
            fetch_timeout: Optional per-fetch timeout in seconds.
        """
        self._source = source
        self._sink = sink
        self._window_size = window_size
        self._fetch_timeout = fetch_timeout

    async def run(self, symbol: str, time_range: TimeRange) -> ResultRecord | None:
        """Process one symbol for one cycle.

        Args:
            symbol: Ticker symbol.
            time_range: Query window.

        Returns:
            The published record, or None if nothing was published.
        """
        try:
            series = await self._fetch(symbol, time_range)
        except FetchError as e:
            logger.warning("Skipping {}: {}", symbol, e.message)
            return None
        except TimeoutError:
            logger.warning(
                "Skipping {}: fetch timed out after {}s", symbol, self._fetch_timeout
            )
            return None

        stats = summarize(series, self._window_size)
        if stats is None:
            logger.debug("No trading data for {} in range", symbol)
            return None

        record = ResultRecord.from_statistics(symbol, time_range, stats)
        try:
            await self._sink.publish(record)
        except SinkClosedError:
            logger.warning("Dropping {}: output closed", symbol)
            return None
        logger.debug("Published {} ({} closes)", symbol, len(series))
        return record

    async def _fetch(self, symbol: str, time_range: TimeRange) -> list[float]:
        if self._fetch_timeout is None:
            return await self._source.fetch_closes(symbol, time_range)
        return await asyncio.wait_for(
            self._source.fetch_closes(symbol, time_range),
            timeout=self._fetch_timeout,
        )
