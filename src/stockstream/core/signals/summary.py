"""Per-series statistics."""

from collections.abc import Sequence
from dataclasses import dataclass

from stockstream.core.signals.indicators import (
    maximum,
    minimum,
    percentage_change,
    windowed_sma,
)

DEFAULT_WINDOW_SIZE = 30


@dataclass(frozen=True)
class Statistics:
    """Summary of one price series.

    Attributes:
        minimum: Lowest close in the period.
        maximum: Highest close in the period.
        last_price: Most recent close.
        absolute_change: Last close minus first close (0.0 if undefined).
        percent_change: Relative change as a fraction (0.0 if undefined).
        trailing_sma: Most recent moving average (0.0 if the series is
            shorter than one window).
        window_size: Window used for the moving average.
    """

    minimum: float
    maximum: float
    last_price: float
    absolute_change: float
    percent_change: float
    trailing_sma: float
    window_size: int = DEFAULT_WINDOW_SIZE


def summarize(
    series: Sequence[float],
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> Statistics | None:
    """Compute statistics for a series.

    Args:
        series: Closing prices ordered by timestamp.
        window_size: Moving-average window.

    Returns:
        Statistics, or None for an empty series.
    """
    low = minimum(series)
    high = maximum(series)
    if low is None or high is None:
        return None

    absolute, relative = percentage_change(series) or (0.0, 0.0)
    sma = windowed_sma(series, window_size)

    return Statistics(
        minimum=low,
        maximum=high,
        last_price=series[-1],
        absolute_change=absolute,
        percent_change=relative,
        trailing_sma=sma[-1] if sma else 0.0,
        window_size=window_size,
    )
