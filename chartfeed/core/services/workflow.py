"""End-to-end stock chart update: fetch, merge, publish."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AsyncExitStack
from datetime import datetime

from loguru import logger

from chartfeed.core.charts import ChartBackend, DatawrapperClient, Payload
from chartfeed.core.config import ChartfeedConfig
from chartfeed.core.exceptions import NoDataAvailableError
from chartfeed.core.exceptions.messages import ErrorCode, ErrorMessageTemplate
from chartfeed.core.logging import log_context
from chartfeed.core.models import MergedTable, PublishResult
from chartfeed.core.providers import AlphaVantageQuoteSource, QuoteSource
from chartfeed.core.services.delimited import serialize_table
from chartfeed.core.services.publish import PublishPipeline, note_factory_for
from chartfeed.core.services.series import fetch_table


class StockChartUpdater:
    """Refresh one chart with the latest closing prices of the configured symbols.

    The quote source and chart backend are built from ``config`` unless
    provided; injected collaborators are not opened or closed here.
    """

    def __init__(
        self,
        config: ChartfeedConfig,
        *,
        quote_source: QuoteSource | None = None,
        backend: ChartBackend | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config
        self._quote_source = quote_source
        self._backend = backend
        self.clock = clock

    async def fetch_table(self) -> MergedTable:
        async with AsyncExitStack() as stack:
            source = self._quote_source or await stack.enter_async_context(
                AlphaVantageQuoteSource(self.config.quotes)
            )
            return await fetch_table(
                self.config.pipeline.symbols, source, fetch_timeout=self.config.pipeline.fetch_timeout
            )

    async def fetch(self) -> str:
        return serialize_table(await self.fetch_table())

    async def publish(self, payload: Payload) -> PublishResult:
        pipeline_config = self.config.pipeline
        async with AsyncExitStack() as stack:
            backend = self._backend
            if backend is None and not (pipeline_config.dry_run and not self.config.backend.token):
                backend = await stack.enter_async_context(DatawrapperClient(self.config.backend))
            pipeline = PublishPipeline(
                backend,
                note_factory=note_factory_for(pipeline_config.notes_prefix, pipeline_config.notes_timezone, self.clock),
                stage_timeout=pipeline_config.stage_timeout,
                dry_run=pipeline_config.dry_run,
            )
            return await pipeline.publish(pipeline_config.chart_id, payload)

    async def run(self) -> PublishResult:
        """Fetch the stock table and publish it; nothing is sent when no data came back."""
        chart_id = self.config.pipeline.chart_id
        with log_context(chart_id=chart_id):
            try:
                table = await self.fetch()
            except NoDataAvailableError:
                logger.error(ErrorMessageTemplate.get_message(ErrorCode.NO_DATA_AVAILABLE, chart_id=chart_id))
                raise
            logger.info(f"[{chart_id}] Fetched new data.")
            return await self.publish(table)


__all__ = ["StockChartUpdater"]
