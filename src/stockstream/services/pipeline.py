"""Pipeline driver: fans symbol workers out and funnels results into one sink."""

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime
from enum import Enum

from stockstream.core.signals.summary import DEFAULT_WINDOW_SIZE
from stockstream.data.models import ResultRecord, TimeRange, utc_now
from stockstream.data.quotes.base import QuoteSource
from stockstream.data.sink import DEFAULT_CAPACITY, ResultSink
from stockstream.services.worker import SymbolWorker
from stockstream.utils.errors import PipelineError
from stockstream.utils.logging import get_logger

logger = get_logger(__name__)


class CycleMode(Enum):
    """How often the driver runs a fetch cycle."""

    ONE_SHOT = "one_shot"
    INTERVAL = "interval"


class PipelineState(Enum):
    """Lifecycle of a pipeline driver."""

    IDLE = "idle"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


class PipelineDriver:
    """Runs fetch-compute-publish cycles over a set of symbols.

    Every cycle spawns one SymbolWorker task per symbol, all publishing into
    the same ResultSink. In one-shot mode the sink is closed as soon as the
    single cycle's workers are done. In interval mode a new cycle over
    [start, now] is spawned every `interval` seconds until stop() is called;
    the sink is then closed once in-flight workers have finished.
    """

    def __init__(
        self,
        source: QuoteSource,
        sink: ResultSink | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
        sink_capacity: int | None = None,
        interval: float | None = None,
        fetch_timeout: float | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the driver.

        Args:
            source: Quote source shared by all workers.
            sink: Result sink; a new one is created if omitted.
            window_size: Moving-average window.
            sink_capacity: Capacity of the created sink; cannot be combined
                with sink.
            interval: Seconds between cycles, or None for a single cycle.
            fetch_timeout: Optional per-fetch timeout in seconds.
            clock: Returns the current time; used for range ends.
        """
        if window_size <= 0:
            raise ValueError(f"window_size must be positive, got {window_size}")
        if interval is not None and interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if sink is not None and sink_capacity is not None:
            raise ValueError("Pass either sink or sink_capacity, not both")

        self._source = source
        if sink is None:
            capacity = DEFAULT_CAPACITY if sink_capacity is None else sink_capacity
            sink = ResultSink(capacity=capacity)
        self._sink = sink
        self._window_size = window_size
        self._interval = interval
        self._fetch_timeout = fetch_timeout
        self._clock = clock
        self._state = PipelineState.IDLE
        self._started = False
        self._stop_event = asyncio.Event()
        self._tasks: set[asyncio.Task[ResultRecord | None]] = set()
        self._cycles = 0

    @property
    def sink(self) -> ResultSink:
        """Return the shared result sink."""
        return self._sink

    @property
    def mode(self) -> CycleMode:
        """Return the cycling mode."""
        return CycleMode.ONE_SHOT if self._interval is None else CycleMode.INTERVAL

    @property
    def state(self) -> PipelineState:
        """Return the current lifecycle state."""
        return self._state

    @property
    def cycles(self) -> int:
        """Return the number of cycles started."""
        return self._cycles

    @property
    def in_flight(self) -> int:
        """Return the number of running worker tasks."""
        return len(self._tasks)

    @property
    def is_stopping(self) -> bool:
        """Check if stop() has been requested."""
        return self._stop_event.is_set()

    def start_cycle(
        self,
        symbols: Sequence[str],
        time_range: TimeRange,
    ) -> list[asyncio.Task[ResultRecord | None]]:
        """Spawn one worker task per symbol without waiting for them.

        Args:
            symbols: Symbols to process.
            time_range: Query window shared by the cycle.

        Returns:
            The spawned tasks.
        """
        if self._state in (PipelineState.DRAINING, PipelineState.TERMINATED):
            raise PipelineError(f"Cannot start a cycle while {self._state.value}")

        self._state = PipelineState.RUNNING
        self._cycles += 1
        logger.info(
            "Cycle {}: {} symbols, {} -> {}",
            self._cycles,
            len(symbols),
            time_range.start.isoformat(),
            time_range.end.isoformat(),
        )

        tasks = []
        for symbol in symbols:
            worker = SymbolWorker(
                source=self._source,
                sink=self._sink,
                window_size=self._window_size,
                fetch_timeout=self._fetch_timeout,
            )
            task = asyncio.create_task(
                worker.run(symbol, time_range), name=f"worker-{symbol}"
            )
            self._tasks.add(task)
            task.add_done_callback(self._on_worker_done)
            tasks.append(task)
        return tasks

    def _on_worker_done(self, task: asyncio.Task[ResultRecord | None]) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Worker {} crashed: {}", task.get_name(), repr(task.exception()))
        if not self._tasks and self._state is PipelineState.RUNNING:
            self._state = PipelineState.IDLE

    async def run(
        self,
        symbols: Sequence[str],
        start: datetime,
        end: datetime | None = None,
    ) -> None:
        """Run the pipeline until its cycles are done and the sink is closed.

        Args:
            symbols: Symbols to process each cycle.
            start: Period start.
            end: Period end for one-shot mode; defaults to now. Interval
                mode always ends each period at the time of the cycle.

        Raises:
            PipelineError: If the driver was already run.
            ArgumentError: If the range is invalid.
        """
        if self._started:
            raise PipelineError("Pipeline driver can only be run once")
        self._started = True

        try:
            if self.mode is CycleMode.ONE_SHOT:
                time_range = TimeRange(start=start, end=end or self._clock())
                self.start_cycle(symbols, time_range)
            else:
                # Fails fast on a start in the future.
                TimeRange(start=start, end=self._clock())
                await self._run_interval(symbols, start)
        finally:
            await self._drain()

    async def _run_interval(self, symbols: Sequence[str], start: datetime) -> None:
        logger.info("Refreshing every {}s until stopped", self._interval)
        while not self._stop_event.is_set():
            self.start_cycle(symbols, TimeRange(start=start, end=self._clock()))
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._interval)
            except TimeoutError:
                pass

    async def _drain(self) -> None:
        self._state = PipelineState.DRAINING
        if self._tasks:
            logger.debug("Waiting for {} in-flight workers", len(self._tasks))
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        await self._sink.close()
        self._state = PipelineState.TERMINATED
        logger.info("Pipeline finished after {} cycles", self._cycles)

    async def stop(self) -> None:
        """Stop spawning cycles; in-flight workers finish on their own."""
        if self._stop_event.is_set():
            return
        logger.info("Stopping pipeline...")
        self._stop_event.set()

    def abort(self) -> None:
        """Stop spawning cycles and cancel every in-flight worker.

        Cancelled workers publish nothing; the sink still closes once
        run() has drained.
        """
        self._stop_event.set()
        if not self._tasks:
            return
        logger.warning("Cancelling {} in-flight workers", len(self._tasks))
        for task in list(self._tasks):
            task.cancel()
