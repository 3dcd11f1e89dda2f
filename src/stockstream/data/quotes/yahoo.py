"""Yahoo Finance chart API quote source."""

from typing import Any

import httpx

from stockstream.data.models import PriceSeries, TimeRange
from stockstream.utils.errors import DataUnavailableError
from stockstream.utils.logging import get_logger

logger = get_logger(__name__)

YAHOO_BASE_URL = "https://query1.finance.yahoo.com"
DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) stockstream/0.1"


class YahooQuoteSource:
    """Client for daily closing prices from the Yahoo Finance chart API."""

    def __init__(
        self,
        base_url: str = YAHOO_BASE_URL,
        timeout: float = 30.0,
        adjusted: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the quote source.

        Args:
            base_url: Base URL for the chart API.
            timeout: HTTP timeout in seconds.
            adjusted: Read split/dividend adjusted closes instead of raw closes.
            user_agent: User-Agent header sent with every request.
        """
        self.base_url = base_url
        self.adjusted = adjusted
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json", "User-Agent": user_agent},
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> "YahooQuoteSource":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def fetch_closes(self, symbol: str, time_range: TimeRange) -> PriceSeries:
        """Get daily closing prices for a symbol.

        Args:
            symbol: Ticker symbol.
            time_range: Query window.

        Returns:
            Closing prices sorted by ascending timestamp; empty when nothing
            traded in the range.

        Raises:
            DataUnavailableError: On any transport or payload failure.
        """
        params = {
            "period1": time_range.start_timestamp,
            "period2": time_range.end_timestamp,
            "interval": "1d",
            "events": "div|split",
        }
        try:
            response = await self._http.get(f"/v8/finance/chart/{symbol}", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Chart request for {} failed: {}", symbol, str(e))
            raise DataUnavailableError(
                f"Failed to fetch quotes for {symbol}: {e}",
                symbol=symbol,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Chart request for {} failed: {}", symbol, str(e))
            raise DataUnavailableError(
                f"Failed to fetch quotes for {symbol}: {e}", symbol=symbol
            ) from e
        except ValueError as e:
            raise DataUnavailableError(
                f"Invalid JSON in quotes for {symbol}", symbol=symbol
            ) from e

        return self.parse_chart(payload, symbol=symbol, adjusted=self.adjusted)

    @staticmethod
    def parse_chart(
        payload: dict[str, Any],
        symbol: str = "",
        adjusted: bool = True,
    ) -> PriceSeries:
        """Extract closing prices from a chart API payload.

        Rows without a price are skipped and the rest are ordered by their
        timestamp, whatever order the provider sent them in.

        Args:
            payload: Decoded chart API response.
            symbol: Symbol used in error messages.
            adjusted: Read adjclose instead of close.

        Returns:
            Closing prices sorted by timestamp.

        Raises:
            DataUnavailableError: If the payload reports an error or is malformed.
        """
        try:
            chart = payload["chart"]
            if chart.get("error"):
                description = chart["error"].get("description", chart["error"])
                raise DataUnavailableError(
                    f"Chart API error for {symbol}: {description}", symbol=symbol
                )

            result = chart["result"][0]
            timestamps = result.get("timestamp") or []
            if not timestamps:
                return []

            indicators = result["indicators"]
            if adjusted:
                prices = indicators["adjclose"][0]["adjclose"]
            else:
                prices = indicators["quote"][0]["close"]

            rows = [
                (int(ts), float(price))
                for ts, price in zip(timestamps, prices, strict=True)
                if price is not None
            ]
        except DataUnavailableError:
            raise
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            raise DataUnavailableError(
                f"Malformed chart payload for {symbol}", symbol=symbol
            ) from e

        rows.sort(key=lambda row: row[0])
        return [price for _, price in rows]
