"""Bounded result channel between symbol workers and the output stage."""

import asyncio
from collections.abc import AsyncIterator
from typing import cast

from stockstream.data.models import ResultRecord
from stockstream.utils.errors import SinkClosedError

_END_OF_STREAM = object()

DEFAULT_CAPACITY = 100


class ResultSink:
    """Bounded multi-producer, single-consumer queue of result records.

    Producers suspend in publish() while the sink is full, which throttles
    them to the speed of the consumer. close() queues an end-of-stream
    marker behind every record already published; once the consumer reaches
    it, consume() returns None instead of waiting.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        """Initialize the sink.

        Args:
            capacity: Maximum number of records buffered at once.
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._capacity = capacity
        # One extra slot so the end-of-stream marker never waits behind a full buffer.
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=capacity + 1)
        self._slots = asyncio.Semaphore(capacity)
        self._closed = False
        self._drained = False

    @property
    def capacity(self) -> int:
        """Return the configured capacity."""
        return self._capacity

    @property
    def size(self) -> int:
        """Return number of buffered records."""
        return self._queue.qsize() - (1 if self._closed and not self._drained else 0)

    @property
    def is_closed(self) -> bool:
        """Check if producers have been shut out."""
        return self._closed

    async def publish(self, record: ResultRecord) -> None:
        """Add a record, waiting while the sink is full.

        Args:
            record: The record to publish.

        Raises:
            SinkClosedError: If the sink was closed.
        """
        if self._closed:
            raise SinkClosedError(f"Cannot publish {record.symbol}: sink is closed")
        await self._slots.acquire()
        if self._closed:
            self._slots.release()
            raise SinkClosedError(f"Cannot publish {record.symbol}: sink is closed")
        self._queue.put_nowait(record)

    async def consume(self, timeout: float | None = None) -> ResultRecord | None:
        """Get the next record.

        Args:
            timeout: Optional timeout in seconds.

        Returns:
            The next record, or None once the sink is closed and drained.

        Raises:
            asyncio.TimeoutError: If timeout is specified and nothing arrives
                within the timeout period.
        """
        if self._drained:
            return None
        if timeout is not None:
            item = await asyncio.wait_for(self._queue.get(), timeout=timeout)
        else:
            item = await self._queue.get()
        return self._unwrap(item)

    def get_nowait(self) -> ResultRecord | None:
        """Get a record without waiting.

        Returns:
            The next record, or None if nothing is buffered or the stream ended.
        """
        if self._drained:
            return None
        try:
            item = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        return self._unwrap(item)

    def _unwrap(self, item: object) -> ResultRecord | None:
        if item is _END_OF_STREAM:
            self._drained = True
            return None
        self._slots.release()
        return cast(ResultRecord, item)

    async def close(self) -> None:
        """Signal that no more records will be published.

        Producers still waiting for a slot are woken and raise
        SinkClosedError; their records are dropped.
        """
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_END_OF_STREAM)
        # Each woken publisher releases again, so one release reaches every waiter.
        self._slots.release()

    def __aiter__(self) -> AsyncIterator[ResultRecord]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[ResultRecord]:
        while True:
            record = await self.consume()
            if record is None:
                return
            yield record
