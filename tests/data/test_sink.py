"""Tests for the bounded result sink."""

import asyncio
from datetime import UTC, datetime

import pytest

from stockstream.data.models import ResultRecord
from stockstream.data.sink import ResultSink
from stockstream.utils.errors import SinkClosedError


def _make_record(symbol: str = "AAPL", price: float = 150.0) -> ResultRecord:
    """Helper to create ResultRecord for tests."""
    return ResultRecord(
        period_start=datetime(2024, 1, 1, tzinfo=UTC),
        period_end=datetime(2024, 2, 1, tzinfo=UTC),
        symbol=symbol,
        last_price=price,
        percent_change=0.05,
        minimum=140.0,
        maximum=155.0,
        trailing_sma=148.0,
    )


def test_sink_rejects_non_positive_capacity() -> None:
    """Capacity must be positive."""
    with pytest.raises(ValueError):
        ResultSink(capacity=0)


class TestPublishConsume:
    """Tests for moving records through an open sink."""

    @pytest.mark.asyncio
    async def test_publish_and_consume(self) -> None:
        """Publish and consume a record."""
        sink = ResultSink()
        record = _make_record()

        await sink.publish(record)
        assert sink.size == 1

        result = await sink.consume(timeout=1.0)
        assert result == record
        assert sink.size == 0

    @pytest.mark.asyncio
    async def test_is_fifo(self) -> None:
        """Records come out in publish order."""
        sink = ResultSink(capacity=5)
        for symbol in ["A", "B", "C"]:
            await sink.publish(_make_record(symbol))

        symbols = [(await sink.consume(timeout=1.0)).symbol for _ in range(3)]
        assert symbols == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_publish_blocks_when_full(self) -> None:
        """Publishing into a full sink suspends until space frees."""
        sink = ResultSink(capacity=1)
        await sink.publish(_make_record("A"))

        blocked = asyncio.create_task(sink.publish(_make_record("B")))
        await asyncio.sleep(0.05)
        assert not blocked.done()
        assert sink.size == 1

        first = await sink.consume(timeout=1.0)
        await asyncio.wait_for(blocked, timeout=1.0)

        assert first is not None and first.symbol == "A"
        second = await sink.consume(timeout=1.0)
        assert second is not None and second.symbol == "B"

    @pytest.mark.asyncio
    async def test_consume_timeout(self) -> None:
        """consume with timeout raises TimeoutError when empty."""
        sink = ResultSink()

        with pytest.raises(asyncio.TimeoutError):
            await sink.consume(timeout=0.1)

    @pytest.mark.asyncio
    async def test_get_nowait(self) -> None:
        """get_nowait returns record or None."""
        sink = ResultSink()
        assert sink.get_nowait() is None

        record = _make_record()
        await sink.publish(record)
        assert sink.get_nowait() == record
        assert sink.get_nowait() is None

    @pytest.mark.asyncio
    async def test_many_producers_no_loss(self) -> None:
        """More producers than capacity: every record arrives exactly once."""
        sink = ResultSink(capacity=3)
        symbols = [f"SYM{i}" for i in range(25)]

        async def produce(symbol: str) -> None:
            await sink.publish(_make_record(symbol))

        async def consume() -> list[str]:
            seen = []
            async for record in sink:
                seen.append(record.symbol)
                await asyncio.sleep(0.001)
            return seen

        consumer = asyncio.create_task(consume())
        await asyncio.gather(*(produce(s) for s in symbols))
        await sink.close()
        seen = await asyncio.wait_for(consumer, timeout=5.0)

        assert sorted(seen) == sorted(symbols)
        assert len(seen) == len(set(seen))


class TestClose:
    """Tests for end of stream."""

    @pytest.mark.asyncio
    async def test_close_signals_end_of_stream(self) -> None:
        """Consumer sees buffered records, then end of stream."""
        sink = ResultSink()
        await sink.publish(_make_record("A"))
        await sink.close()

        assert sink.is_closed
        assert sink.size == 1
        first = await sink.consume(timeout=1.0)
        assert first is not None and first.symbol == "A"
        assert await sink.consume(timeout=1.0) is None
        # End of stream is sticky
        assert await sink.consume(timeout=1.0) is None

    @pytest.mark.asyncio
    async def test_close_wakes_waiting_consumer(self) -> None:
        """A consumer waiting on an empty sink returns None on close."""
        sink = ResultSink()
        waiter = asyncio.create_task(sink.consume())
        await asyncio.sleep(0.05)
        assert not waiter.done()

        await sink.close()

        assert await asyncio.wait_for(waiter, timeout=1.0) is None

    @pytest.mark.asyncio
    async def test_close_when_full_does_not_block(self) -> None:
        """Closing a full sink returns immediately."""
        sink = ResultSink(capacity=2)
        await sink.publish(_make_record("A"))
        await sink.publish(_make_record("B"))

        await asyncio.wait_for(sink.close(), timeout=1.0)

        records = [record async for record in sink]
        assert [r.symbol for r in records] == ["A", "B"]

    @pytest.mark.asyncio
    async def test_close_wakes_every_blocked_publisher(self) -> None:
        """Publishers waiting on a full sink fail instead of hanging."""
        sink = ResultSink(capacity=1)
        await sink.publish(_make_record("A"))
        blocked = [
            asyncio.create_task(sink.publish(_make_record(symbol)))
            for symbol in ["B", "C", "D"]
        ]
        await asyncio.sleep(0.05)
        assert not any(task.done() for task in blocked)

        await sink.close()
        results = await asyncio.wait_for(
            asyncio.gather(*blocked, return_exceptions=True), timeout=1.0
        )

        assert all(isinstance(r, SinkClosedError) for r in results)
        records = [record async for record in sink]
        assert [r.symbol for r in records] == ["A"]

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self) -> None:
        """Closing twice queues one end-of-stream marker."""
        sink = ResultSink()
        await sink.close()
        await sink.close()

        assert await sink.consume(timeout=1.0) is None
        assert sink.size == 0

    @pytest.mark.asyncio
    async def test_publish_after_close_raises(self) -> None:
        """Producers are shut out after close."""
        sink = ResultSink()
        await sink.close()

        with pytest.raises(SinkClosedError):
            await sink.publish(_make_record())
