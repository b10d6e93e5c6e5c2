"""
Alpha Vantage quote source.

Requests one time series per symbol and reduces it to closing values keyed
by the timestamp strings the API returned.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from chartfeed.core.config import QuoteSourceConfig
from chartfeed.core.exceptions import ConfigurationError, ProviderError
from chartfeed.core.http_adapter import AuthConfig, AuthType, HttpClient, HttpConfig
from chartfeed.core.models import MissingSeries, QuotePoint, SeriesResponse, ValidSeries

# Keys Alpha Vantage uses to report a refused request instead of data.
_API_MESSAGE_KEYS = ("Error Message", "Note", "Information")


class AlphaVantageQuoteSource:
    """
    Quote source backed by the Alpha Vantage ``/query`` endpoint.

    Use as an async context manager so concurrent fetches share one
    connection pool that is closed when the batch finishes.
    """

    name = "alpha_vantage"

    def __init__(
        self,
        config: QuoteSourceConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not config.api_key:
            raise ConfigurationError("Alpha Vantage API key is required", missing=["quotes.api_key"])
        self.config = config
        self.http_client = HttpClient(
            self.name,
            HttpConfig(base_url=config.base_url, timeout=config.timeout, user_agent="chartfeed-alpha-vantage/0.1.0"),
            AuthConfig(auth_type=AuthType.API_KEY, credentials={"api_key": config.api_key}),
            transport=transport,
        )

    async def __aenter__(self) -> "AlphaVantageQuoteSource":
        await self.http_client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.http_client.close()

    def build_params(self, symbol: str) -> dict[str, str]:
        """Query parameters for ``symbol``; the API key is added by the client."""
        return {
            "function": self.config.function,
            "symbol": symbol,
            "interval": self.config.interval,
            "datatype": self.config.datatype,
        }

    async def fetch_series(self, symbol: str) -> SeriesResponse:
        try:
            response = await self.http_client.get(self.config.query_path, params=self.build_params(symbol))
            body = response.json()
        except ProviderError as e:
            logger.bind(symbol=symbol).warning(f"Error: request for {symbol} failed: {e.message}")
            return MissingSeries(symbol=symbol, reason=e.message, cause=e)
        except ValueError as e:
            logger.bind(symbol=symbol).warning(f"Error: response for {symbol} is not JSON: {e}")
            return MissingSeries(symbol=symbol, reason="response body is not JSON", cause=e)

        return self.parse_series(symbol, body)

    def parse_series(self, symbol: str, body: Any) -> SeriesResponse:
        """Turn a decoded response body into a series result.

        A body without the configured series container means the symbol is
        missing; entries without a close value are skipped.
        """
        if not isinstance(body, dict) or not isinstance(body.get(self.config.series_key), dict):
            reason = _describe_missing(body, self.config.series_key)
            logger.bind(symbol=symbol).warning(f"Error: No data for {symbol}. {reason}")
            return MissingSeries(symbol=symbol, reason=reason)

        points = []
        for timestamp, values in body[self.config.series_key].items():
            close = values.get(self.config.close_field) if isinstance(values, dict) else None
            if close is None:
                continue
            points.append(QuotePoint(timestamp=timestamp, value=str(close), symbol=symbol))

        if not points:
            reason = f"'{self.config.series_key}' holds no '{self.config.close_field}' values"
            logger.bind(symbol=symbol).warning(f"Error: No data for {symbol}. {reason}")
            return MissingSeries(symbol=symbol, reason=reason)

        logger.bind(symbol=symbol).debug(f"Fetched {len(points)} quotes for {symbol}")
        return ValidSeries(symbol=symbol, points=tuple(points))


def _describe_missing(body: Any, series_key: str) -> str:
    if isinstance(body, dict):
        for key in _API_MESSAGE_KEYS:
            if key in body:
                return f"{key}: {body[key]}"
    return f"response has no '{series_key}' series"


__all__ = ["AlphaVantageQuoteSource"]
