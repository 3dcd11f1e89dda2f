"""CSV output stage."""

import csv
from typing import TextIO

from stockstream.core.signals.summary import DEFAULT_WINDOW_SIZE
from stockstream.data.models import TimestampFormat
from stockstream.data.sink import ResultSink
from stockstream.utils.logging import get_logger

logger = get_logger(__name__)


def csv_header(window_size: int = DEFAULT_WINDOW_SIZE) -> list[str]:
    """Column names matching ResultRecord.to_csv_row()."""
    return [
        "period start",
        "period end",
        "symbol",
        "price",
        "change %",
        "min",
        "max",
        f"{window_size}d avg",
    ]


async def emit_csv(
    sink: ResultSink,
    out: TextIO,
    window_size: int = DEFAULT_WINDOW_SIZE,
    timestamp_format: TimestampFormat = "iso",
    header: bool = True,
) -> int:
    """Write records to out as they arrive, until the sink ends.

    Args:
        sink: Sink to drain.
        out: Text stream receiving CSV lines.
        window_size: Window shown in the header.
        timestamp_format: "iso" or "unix" period bounds.
        header: Write the header line first.

    Returns:
        Number of data rows written.
    """
    writer = csv.writer(out, lineterminator="\n")
    if header:
        writer.writerow(csv_header(window_size))
        out.flush()

    rows = 0
    async for record in sink:
        writer.writerow(record.to_csv_row(timestamp_format))
        out.flush()
        rows += 1

    logger.debug("Wrote {} rows", rows)
    return rows
