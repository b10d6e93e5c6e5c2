"""Concurrent fetch and wide-table merge of symbol series."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from loguru import logger

from chartfeed.core.exceptions import FetchError, NoDataAvailableError, ProviderError
from chartfeed.core.models import MergedTable, MissingSeries, SeriesResponse, ValidSeries
from chartfeed.core.providers import QuoteSource
from chartfeed.core.services.delimited import serialize_table


async def _fetch_one(source: QuoteSource, symbol: str, timeout: float | None) -> SeriesResponse:
    try:
        if timeout is None:
            return await source.fetch_series(symbol)
        return await asyncio.wait_for(source.fetch_series(symbol), timeout)
    except TimeoutError as e:
        logger.bind(symbol=symbol).warning(f"Error: request for {symbol} timed out after {timeout}s")
        return MissingSeries(symbol=symbol, reason=f"timed out after {timeout}s", cause=e)
    except ProviderError as e:
        logger.bind(symbol=symbol).warning(f"Error: No data for {symbol}. {e.message}")
        return MissingSeries(symbol=symbol, reason=e.message, cause=e)


async def fetch_all(
    symbols: Sequence[str],
    source: QuoteSource,
    fetch_timeout: float | None = None,
) -> list[SeriesResponse]:
    """Fetch every symbol concurrently and return results in input order.

    All requests settle before this returns; one failure never cancels the
    others. Recoverable failures come back as :class:`MissingSeries`, anything
    else raises :class:`FetchError`.
    """
    if not symbols:
        raise FetchError("No symbols requested")

    settled = await asyncio.gather(
        *(_fetch_one(source, symbol, fetch_timeout) for symbol in symbols),
        return_exceptions=True,
    )

    results: list[SeriesResponse] = []
    for symbol, outcome in zip(symbols, settled, strict=True):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.bind(symbol=symbol).error(f"Error fetching stock data: {outcome!r}")
            raise FetchError(f"Fetching {symbol} failed", cause=outcome, details={"symbol": symbol}) from outcome
        results.append(outcome)
    return results


def merge_series(responses: Sequence[SeriesResponse]) -> MergedTable:
    """Merge per-symbol series into one wide table.

    Row order is the timestamp order of the first valid series. Timestamps
    that only appear in later series are not added. Missing symbols are left
    out of the header.
    """
    valid = [response for response in responses if isinstance(response, ValidSeries)]
    dropped = [response.symbol for response in responses if isinstance(response, MissingSeries)]
    if not valid:
        raise NoDataAvailableError(
            "No data available",
            symbols=dropped,
            reasons={r.symbol: r.reason for r in responses if isinstance(r, MissingSeries)},
        )

    lookups = [series.by_timestamp() for series in valid]
    table = MergedTable(symbols=[series.symbol for series in valid], dropped=dropped)
    for timestamp in valid[0].timestamps:
        table.rows.append([timestamp, *(lookup.get(timestamp) for lookup in lookups)])
    return table


async def fetch_table(
    symbols: Sequence[str],
    source: QuoteSource,
    fetch_timeout: float | None = None,
) -> MergedTable:
    responses = await fetch_all(symbols, source, fetch_timeout=fetch_timeout)
    table = merge_series(responses)
    if table.dropped:
        logger.warning(f"Dropped symbols without data: {', '.join(table.dropped)}")
    return table


async def fetch_and_merge(
    symbols: Sequence[str],
    source: QuoteSource,
    fetch_timeout: float | None = None,
) -> str:
    """Fetch ``symbols`` and return the merged pipe-delimited table."""
    table = await fetch_table(symbols, source, fetch_timeout=fetch_timeout)
    return serialize_table(table)


__all__ = ["fetch_all", "merge_series", "fetch_table", "fetch_and_merge"]
