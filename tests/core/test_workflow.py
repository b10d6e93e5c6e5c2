"""Tests for the end-to-end stock chart update."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx
import pytest

from chartfeed.core.config import ChartBackendConfig, ChartfeedConfig, PipelineConfig, QuoteSourceConfig
from chartfeed.core.exceptions import NoDataAvailableError, StageFailureError
from chartfeed.core.models import MissingSeries, QuotePoint, SeriesResponse, ValidSeries
from chartfeed.core.services import StockChartUpdater


def CLOCK() -> datetime:
    return datetime(2024, 3, 5, 8, 7, tzinfo=timezone.utc)


class StubQuoteSource:
    name = "stub"

    def __init__(self, series: dict[str, dict[str, str]]):
        self.series = series

    async def fetch_series(self, symbol: str) -> SeriesResponse:
        values = self.series.get(symbol)
        if not values:
            return MissingSeries(symbol=symbol, reason="no series")
        return ValidSeries(
            symbol=symbol,
            points=tuple(QuotePoint(timestamp=ts, value=v, symbol=symbol) for ts, v in values.items()),
        )


class StubBackend:
    name = "stub"

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.calls: list[tuple[str, object]] = []

    async def upload_data(self, chart_id: str, payload: object) -> None:
        self.calls.append(("upload", payload))

    async def update_notes(self, chart_id: str, notes: str) -> None:
        self.calls.append(("annotate", notes))
        if self.fail_on == "annotate":
            raise RuntimeError("metadata rejected")

    async def publish_chart(self, chart_id: str) -> str:
        self.calls.append(("republish", chart_id))
        return f"https://charts.example.org/{chart_id}/"


def _config(symbols: list[str], **pipeline) -> ChartfeedConfig:
    return ChartfeedConfig(
        quotes=QuoteSourceConfig(api_key="k"),
        backend=ChartBackendConfig(token="t"),
        pipeline=PipelineConfig(chart_id="2bB1Y", symbols=symbols, **pipeline),
    )


@pytest.mark.asyncio
async def test_run_fetches_and_publishes() -> None:
    backend = StubBackend()
    updater = StockChartUpdater(
        _config(["A", "B"]),
        quote_source=StubQuoteSource({"A": {"t1": "1", "t2": "2"}, "B": {"t1": "3"}}),
        backend=backend,
        clock=CLOCK,
    )

    result = await updater.run()

    assert result.public_url == "https://charts.example.org/2bB1Y/"
    assert backend.calls == [
        ("upload", "Date|A|B\nt1|1|3\nt2|2|"),
        ("annotate", "Actualizado: 5 mar, 09.07."),
        ("republish", "2bB1Y"),
    ]


@pytest.mark.asyncio
async def test_no_data_means_no_backend_calls() -> None:
    backend = StubBackend()
    updater = StockChartUpdater(_config(["A", "B"]), quote_source=StubQuoteSource({}), backend=backend)

    with pytest.raises(NoDataAvailableError):
        await updater.run()

    assert backend.calls == []


@pytest.mark.asyncio
async def test_stage_failure_propagates() -> None:
    backend = StubBackend(fail_on="annotate")
    updater = StockChartUpdater(
        _config(["A"]), quote_source=StubQuoteSource({"A": {"t1": "1"}}), backend=backend, clock=CLOCK
    )

    with pytest.raises(StageFailureError) as excinfo:
        await updater.run()

    assert excinfo.value.stage == "annotate"
    assert [call[0] for call in backend.calls] == ["upload", "annotate"]


@pytest.mark.asyncio
async def test_dry_run_without_token_builds_no_backend() -> None:
    config = _config(["A"], dry_run=True)
    config.backend.token = None
    updater = StockChartUpdater(config, quote_source=StubQuoteSource({"A": {"t1": "1"}}))

    result = await updater.run()

    assert result.dry_run is True
    assert result.public_url is None


@pytest.mark.asyncio
async def test_default_collaborators_are_built_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.host == "www.alphavantage.co":
            return httpx.Response(200, json={"Time Series (1min)": {"t1": {"4. close": "5.0"}}})
        if request.url.path.endswith("/publish"):
            return httpx.Response(200, json={"publicUrl": "//datawrapper.dwcdn.net/2bB1Y/1/"})
        return httpx.Response(204)

    real_client = httpx.AsyncClient

    def client_with_mock_transport(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_with_mock_transport)

    result = await StockChartUpdater(_config(["NVDA"]), clock=CLOCK).run()

    assert result.public_url == "https://datawrapper.dwcdn.net/2bB1Y/1/"
    assert [r.method for r in requests] == ["GET", "PUT", "PATCH", "POST"]
    assert requests[1].content == b"Date|NVDA\nt1|5.0"
