"""Quote sources."""

from stockstream.data.quotes.base import QuoteSource
from stockstream.data.quotes.yahoo import YahooQuoteSource

__all__ = ["QuoteSource", "YahooQuoteSource"]
