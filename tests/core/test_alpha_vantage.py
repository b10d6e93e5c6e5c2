"""Tests for the Alpha Vantage quote source."""

from __future__ import annotations

import httpx
import pytest

from chartfeed.core.config import QuoteSourceConfig
from chartfeed.core.exceptions import ConfigurationError
from chartfeed.core.models import MissingSeries, ValidSeries
from chartfeed.core.providers import AlphaVantageQuoteSource, QuoteSource
from chartfeed.core.services import fetch_and_merge

SERIES_KEY = "Time Series (1min)"


def _body(closes: dict[str, str]) -> dict[str, object]:
    return {
        "Meta Data": {"1. Information": "Daily Prices"},
        SERIES_KEY: {ts: {"1. open": "0", "4. close": close} for ts, close in closes.items()},
    }


def _source(handler) -> AlphaVantageQuoteSource:
    return AlphaVantageQuoteSource(
        QuoteSourceConfig(api_key="demo-key"),
        transport=httpx.MockTransport(handler),
    )


def test_requires_api_key() -> None:
    with pytest.raises(ConfigurationError):
        AlphaVantageQuoteSource(QuoteSourceConfig(api_key=None))


def test_satisfies_quote_source_protocol() -> None:
    assert isinstance(_source(lambda request: httpx.Response(200, json={})), QuoteSource)


@pytest.mark.asyncio
async def test_request_parameters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_body({"2024-01-02": "10.0"}))

    async with _source(handler) as source:
        await source.fetch_series("NVDA")

    params = seen[0].url.params
    assert seen[0].url.path == "/query"
    assert params["apikey"] == "demo-key"
    assert params["function"] == "TIME_SERIES_DAILY"
    assert params["symbol"] == "NVDA"
    assert params["interval"] == "1min"
    assert params["datatype"] == "json"


@pytest.mark.asyncio
async def test_valid_series_keeps_response_order_and_close_text() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_body({"2024-01-03": "12.50", "2024-01-02": "11.00"}))

    async with _source(handler) as source:
        result = await source.fetch_series("NVDA")

    assert isinstance(result, ValidSeries)
    assert result.timestamps == ["2024-01-03", "2024-01-02"]
    assert result.by_timestamp()["2024-01-03"] == "12.50"


@pytest.mark.asyncio
async def test_missing_series_container_is_degraded() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"Note": "API call frequency exceeded"})

    async with _source(handler) as source:
        result = await source.fetch_series("NVDA")

    assert isinstance(result, MissingSeries)
    assert "API call frequency" in result.reason


@pytest.mark.asyncio
async def test_http_error_is_degraded() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    async with _source(handler) as source:
        result = await source.fetch_series("NVDA")

    assert isinstance(result, MissingSeries)
    assert result.cause is not None


@pytest.mark.asyncio
async def test_transport_error_is_degraded() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _source(handler) as source:
        result = await source.fetch_series("NVDA")

    assert isinstance(result, MissingSeries)


@pytest.mark.asyncio
async def test_non_json_body_is_degraded() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    async with _source(handler) as source:
        result = await source.fetch_series("NVDA")

    assert isinstance(result, MissingSeries)


@pytest.mark.asyncio
async def test_fetch_and_merge_over_http() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        symbol = request.url.params["symbol"]
        if symbol == "AAPL":
            return httpx.Response(200, json={"Error Message": "Invalid API call"})
        if symbol == "NVDA":
            return httpx.Response(200, json=_body({"t1": "1.1", "t2": "1.2"}))
        return httpx.Response(200, json=_body({"t2": "9.9"}))

    async with _source(handler) as source:
        text = await fetch_and_merge(["AAPL", "NVDA", "MSFT"], source)

    assert text == "Date|NVDA|MSFT\nt1|1.1|\nt2|1.2|9.9"
