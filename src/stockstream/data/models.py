"""Pipeline data models."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Literal

from stockstream.core.signals.summary import Statistics
from stockstream.utils.errors import ArgumentError

PriceSeries = list[float]
TimestampFormat = Literal["iso", "unix"]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_timestamp(raw: str) -> datetime:
    """Parse a user supplied timestamp.

    Accepts ISO-8601 / RFC 3339 datetimes, bare dates (midnight UTC) and
    Unix epoch seconds. Naive values are taken as UTC.

    Args:
        raw: Timestamp text.

    Returns:
        Aware UTC datetime.

    Raises:
        ArgumentError: If the text is not a recognizable timestamp.
    """
    text = raw.strip()
    if not text:
        raise ArgumentError("Timestamp must not be empty")

    if text.lstrip("-").isdigit():
        try:
            return datetime.fromtimestamp(int(text), tz=UTC)
        except (OverflowError, OSError, ValueError) as e:
            raise ArgumentError(f"Timestamp out of range: {raw!r}") from e

    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    try:
        day = date.fromisoformat(text)
    except ValueError as e:
        raise ArgumentError(f"Could not parse timestamp: {raw!r}") from e
    return datetime(day.year, day.month, day.day, tzinfo=UTC)


def parse_symbols(raw: str) -> list[str]:
    """Split a comma separated symbol list.

    Duplicates are dropped, keeping the first occurrence.

    Raises:
        ArgumentError: On an empty list or an empty entry.
    """
    symbols: list[str] = []
    for part in raw.split(","):
        symbol = part.strip()
        if not symbol:
            raise ArgumentError(f"Empty symbol in {raw!r}")
        if symbol not in symbols:
            symbols.append(symbol)
    return symbols


@dataclass(frozen=True)
class TimeRange:
    """Query window for a fetch; start <= end, both UTC."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_utc(self.start))
        object.__setattr__(self, "end", _as_utc(self.end))
        if self.start > self.end:
            raise ArgumentError(
                f"Range start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @classmethod
    def ending_now(cls, start: datetime) -> "TimeRange":
        """Range from start to the current time."""
        return cls(start=start, end=utc_now())

    @property
    def start_timestamp(self) -> int:
        """Start as Unix epoch seconds."""
        return int(self.start.timestamp())

    @property
    def end_timestamp(self) -> int:
        """End as Unix epoch seconds."""
        return int(self.end.timestamp())


def format_timestamp(value: datetime, timestamp_format: TimestampFormat = "iso") -> str:
    """Render a period bound for CSV output."""
    if timestamp_format == "unix":
        return str(int(value.timestamp()))
    return value.isoformat()


@dataclass(frozen=True)
class ResultRecord:
    """One summary row for a symbol and cycle."""

    period_start: datetime
    period_end: datetime
    symbol: str
    last_price: float
    percent_change: float
    minimum: float
    maximum: float
    trailing_sma: float

    @classmethod
    def from_statistics(
        cls,
        symbol: str,
        time_range: TimeRange,
        stats: Statistics,
    ) -> "ResultRecord":
        """Build a record from computed statistics.

        Args:
            symbol: Ticker symbol.
            time_range: Period the series was fetched for.
            stats: Statistics of the series.

        Returns:
            ResultRecord instance.
        """
        return cls(
            period_start=time_range.start,
            period_end=time_range.end,
            symbol=symbol,
            last_price=stats.last_price,
            percent_change=stats.percent_change,
            minimum=stats.minimum,
            maximum=stats.maximum,
            trailing_sma=stats.trailing_sma,
        )

    def to_csv_row(self, timestamp_format: TimestampFormat = "iso") -> list[str]:
        """Render the record as CSV fields.

        Prices get a dollar sign and two decimals; the change is shown in
        percent with two decimals.
        """
        return [
            format_timestamp(self.period_start, timestamp_format),
            format_timestamp(self.period_end, timestamp_format),
            self.symbol,
            f"${self.last_price:.2f}",
            f"{self.percent_change * 100:.2f}%",
            f"${self.minimum:.2f}",
            f"${self.maximum:.2f}",
            f"${self.trailing_sma:.2f}",
        ]
