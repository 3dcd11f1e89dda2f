"""Stream runner for stockstream."""

import asyncio
import sys
from collections.abc import Sequence
from datetime import datetime
from typing import TextIO

from stockstream.config.settings import Settings, load_settings
from stockstream.data.quotes.base import QuoteSource
from stockstream.data.quotes.yahoo import YahooQuoteSource
from stockstream.services.emitter import emit_csv
from stockstream.services.pipeline import PipelineDriver
from stockstream.utils.errors import PipelineError
from stockstream.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


class StreamRunner:
    """Wires settings, quote source, pipeline driver and CSV output together."""

    def __init__(
        self,
        symbols: Sequence[str],
        start: datetime,
        end: datetime | None = None,
        interval: float | None = None,
        settings: Settings | None = None,
        source: QuoteSource | None = None,
        out: TextIO | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            symbols: Symbols to summarize.
            start: Period start.
            end: Period end (one-shot only); defaults to now.
            interval: Seconds between cycles, or None for a single pass.
            settings: Settings to use instead of loading from the environment.
            source: Quote source to use instead of Yahoo Finance.
            out: Stream receiving CSV rows; defaults to stdout.
        """
        self._symbols = list(symbols)
        self._start = start
        self._end = end
        self._interval = interval
        self._settings = settings
        self._source = source
        self._owns_source = source is None
        self._out = out
        self._driver: PipelineDriver | None = None
        self._stopping: bool = False

    @property
    def driver(self) -> PipelineDriver | None:
        """Return the pipeline driver once started."""
        return self._driver

    async def start(self) -> None:
        """Load settings and build the pipeline."""
        if self._settings is None:
            self._settings = load_settings()

        configure_logging(
            level=self._settings.log_level,
            json_format=self._settings.json_logs,
        )

        if self._source is None:
            yahoo = self._settings.yahoo
            self._source = YahooQuoteSource(
                base_url=yahoo.base_url,
                timeout=yahoo.timeout,
                adjusted=yahoo.adjusted,
                user_agent=yahoo.user_agent,
            )
            logger.debug("Yahoo quote source initialized")

        pipeline = self._settings.pipeline
        self._driver = PipelineDriver(
            source=self._source,
            window_size=pipeline.window_size,
            sink_capacity=pipeline.sink_capacity,
            interval=self._interval,
            fetch_timeout=pipeline.fetch_timeout,
        )
        logger.info(
            "Pipeline ready: {} symbols, mode={}",
            len(self._symbols),
            self._driver.mode.value,
        )

    async def stop(self) -> None:
        """Stop the pipeline; in-flight fetches are allowed to finish."""
        # Guard against double-stop
        if self._stopping:
            return
        self._stopping = True

        if self._driver:
            await self._driver.stop()

    async def _on_signal(self) -> None:
        if self._stopping and self._driver:
            logger.warning("Interrupted again, abandoning in-flight fetches")
            self._driver.abort()
            return
        await self.stop()

    async def close(self) -> None:
        """Release the quote source if this runner created it."""
        if self._owns_source and isinstance(self._source, YahooQuoteSource):
            await self._source.close()
            logger.debug("Yahoo quote source closed")

    async def run(self) -> int:
        """Run the pipeline and write CSV until it finishes.

        Returns:
            Number of rows written.
        """
        await self.start()
        if self._driver is None or self._settings is None:
            raise PipelineError("Runner did not start")

        loop = asyncio.get_running_loop()
        handled: list[int] = []
        if sys.platform != "win32":
            import signal

            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, lambda: asyncio.create_task(self._on_signal()))
                handled.append(sig)

        driver = asyncio.create_task(
            self._driver.run(self._symbols, self._start, self._end)
        )
        emitter = asyncio.create_task(
            emit_csv(
                self._driver.sink,
                self._out if self._out is not None else sys.stdout,
                window_size=self._settings.pipeline.window_size,
                timestamp_format=self._settings.timestamp_format,
            )
        )
        try:
            await asyncio.wait({driver, emitter}, return_when=asyncio.FIRST_EXCEPTION)
            if emitter.done() and emitter.exception() is not None:
                # Nobody reads the sink any more; shut producers out.
                logger.error("Output failed: {}", repr(emitter.exception()))
                await self._driver.stop()
                await self._driver.sink.close()
                await asyncio.gather(driver, return_exceptions=True)
            await driver
            rows = await emitter
        except BaseException:
            driver.cancel()
            emitter.cancel()
            raise
        finally:
            for sig in handled:
                loop.remove_signal_handler(sig)
            await self.close()

        logger.info("Done: {} rows", rows)
        return rows


def run_stream(
    symbols: Sequence[str],
    start: datetime,
    end: datetime | None = None,
    interval: float | None = None,
    settings: Settings | None = None,
) -> int:
    """Entry point to run the stream to completion."""
    runner = StreamRunner(
        symbols=symbols,
        start=start,
        end=end,
        interval=interval,
        settings=settings,
    )
    try:
        return asyncio.run(runner.run())
    except KeyboardInterrupt:
        # On Windows, Ctrl+C raises KeyboardInterrupt
        return 0
