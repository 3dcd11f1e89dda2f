"""Signal library: indicators and series statistics."""

from stockstream.core.signals.indicators import (
    maximum,
    minimum,
    percentage_change,
    windowed_sma,
)
from stockstream.core.signals.summary import DEFAULT_WINDOW_SIZE, Statistics, summarize

__all__ = [
    "DEFAULT_WINDOW_SIZE",
    "Statistics",
    "maximum",
    "minimum",
    "percentage_change",
    "summarize",
    "windowed_sma",
]
