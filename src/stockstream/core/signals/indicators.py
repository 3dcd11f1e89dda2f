"""Price-series indicators.

Every function takes a read-only sequence of closing prices ordered by
ascending timestamp and returns a fresh value; nothing is mutated, so the
functions can be called from any number of concurrent workers.
"""

from collections.abc import Sequence


def maximum(series: Sequence[float]) -> float | None:
    """Largest price in the series, or None if it is empty."""
    if not series:
        return None
    return max(series)


def minimum(series: Sequence[float]) -> float | None:
    """Smallest price in the series, or None if it is empty."""
    if not series:
        return None
    return min(series)


def percentage_change(series: Sequence[float]) -> tuple[float, float] | None:
    """Change between the first and the last price.

    Args:
        series: Closing prices.

    Returns:
        (absolute, relative) where relative is a fraction, e.g. -0.1 for a
        10% drop. None for fewer than two prices or a zero first price.
    """
    if len(series) < 2:
        return None

    first = series[0]
    if first == 0:
        return None

    delta = series[-1] - first
    return delta, delta / first


def windowed_sma(series: Sequence[float], window_size: int) -> list[float]:
    """Simple moving average over every full window, sliding by one.

    Args:
        series: Closing prices.
        window_size: Number of samples per window.

    Returns:
        len(series) - window_size + 1 averages in series order, or an empty
        list when the series is shorter than one window.

    Raises:
        ValueError: If window_size is not positive.
    """
    if window_size <= 0:
        raise ValueError(f"window_size must be positive, got {window_size}")

    if len(series) < window_size:
        return []

    return [
        sum(series[i : i + window_size]) / window_size
        for i in range(len(series) - window_size + 1)
    ]
