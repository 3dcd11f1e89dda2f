"""stockstream - concurrent stock quote summaries."""

__version__ = "0.1.0"
