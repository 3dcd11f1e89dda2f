"""Utility modules for stockstream."""

from stockstream.utils.errors import (
    ArgumentError,
    ConfigError,
    DataError,
    DataUnavailableError,
    FetchError,
    PipelineError,
    SinkClosedError,
    StockStreamError,
)
from stockstream.utils.logging import configure_logging, get_logger

__all__ = [
    "ArgumentError",
    "ConfigError",
    "DataError",
    "DataUnavailableError",
    "FetchError",
    "PipelineError",
    "SinkClosedError",
    "StockStreamError",
    "configure_logging",
    "get_logger",
]
