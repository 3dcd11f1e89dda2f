"""Custom exception classes for stockstream."""


class StockStreamError(Exception):
    """Base exception for all stockstream errors."""

    pass


class ConfigError(StockStreamError):
    """Configuration error."""

    pass


class ArgumentError(StockStreamError):
    """Malformed user input (symbols, timestamps, time ranges)."""

    pass


class PipelineError(StockStreamError):
    """Pipeline lifecycle misuse."""

    pass


class SinkClosedError(StockStreamError):
    """A record was published after the result sink was closed."""

    pass


class DataError(StockStreamError):
    """Data fetching or processing error."""

    pass


class FetchError(DataError):
    """A quote source could not deliver a price series."""

    def __init__(self, message: str = "Quote fetch failed", symbol: str | None = None) -> None:
        """Initialize the exception with the symbol that failed."""
        self.message = message
        self.symbol = symbol
        super().__init__(self.message)


class DataUnavailableError(FetchError):
    """Transport, auth or malformed-response failure from the data source."""

    def __init__(
        self,
        message: str = "Quote data unavailable",
        symbol: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize the exception with provider error details."""
        self.status_code = status_code
        super().__init__(message, symbol=symbol)
