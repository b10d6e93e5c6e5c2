"""Fetch, merge and publish services."""

from chartfeed.core.services.delimited import DELIMITER, join_rows, parse_table, serialize_table
from chartfeed.core.services.freshness import format_freshness_note
from chartfeed.core.services.publish import PublishPipeline, note_factory_for
from chartfeed.core.services.series import fetch_all, fetch_and_merge, fetch_table, merge_series
from chartfeed.core.services.workflow import StockChartUpdater

__all__ = [
    "DELIMITER",
    "join_rows",
    "serialize_table",
    "parse_table",
    "format_freshness_note",
    "fetch_all",
    "merge_series",
    "fetch_table",
    "fetch_and_merge",
    "PublishPipeline",
    "note_factory_for",
    "StockChartUpdater",
]
