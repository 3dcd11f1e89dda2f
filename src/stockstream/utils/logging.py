"""Logging setup; stdout is reserved for CSV rows."""

import sys
from typing import Any, TextIO

from loguru import logger

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: TextIO | None = None,
) -> Any:
    """Route all log records to one stream.

    Args:
        level: Minimum level name, case-insensitive.
        json_format: Emit one serialized JSON object per record.
        stream: Destination; defaults to stderr.

    Returns:
        The configured loguru logger.
    """
    sink = stream if stream is not None else sys.stderr
    handler: dict[str, Any] = {"sink": sink, "level": level.upper()}
    if json_format:
        handler.update(format="{message}", serialize=True)
    else:
        handler.update(format=TEXT_FORMAT, colorize=stream is None)

    # Replaces every existing handler, including loguru's default one.
    logger.configure(handlers=[handler], extra={"name": "stockstream"})
    return logger


def get_logger(name: str) -> Any:
    """Return the logger bound to a component name."""
    return logger.bind(name=name)
