"""Live round trip against Alpha Vantage and Datawrapper.

Needs ALPHA_VANTAGE_API, DW_TOKEN and CHARTFEED_CHART_ID in the environment.
"""

from __future__ import annotations

import os

import pytest

from chartfeed.core.config import ConfigManager
from chartfeed.core.services import StockChartUpdater, parse_table


def _live_config():
    missing = [name for name in ("ALPHA_VANTAGE_API", "DW_TOKEN", "CHARTFEED_CHART_ID") if not os.getenv(name)]
    if missing:
        pytest.skip(f"missing environment: {', '.join(missing)}")
    config = ConfigManager().get_config()
    if not config.pipeline.symbols:
        config.pipeline.symbols = ["NVDA"]
    return config


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_live_series() -> None:
    config = _live_config()
    config.quotes.series_key = "Time Series (Daily)"

    text = await StockChartUpdater(config).fetch()

    rows = parse_table(text)
    assert rows[0][0] == "Date"
    assert len(rows) > 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_publish_live_chart() -> None:
    config = _live_config()
    config.quotes.series_key = "Time Series (Daily)"

    result = await StockChartUpdater(config).run()

    assert result.public_url and result.public_url.startswith("https://")
