"""chartfeed core: configuration, adapters, models and services."""

from chartfeed.core.config import ChartfeedConfig, ConfigManager
from chartfeed.core.models import MergedTable, PublishResult, PublishStage
from chartfeed.core.services import PublishPipeline, StockChartUpdater, fetch_and_merge

__all__ = [
    "ChartfeedConfig",
    "ConfigManager",
    "MergedTable",
    "PublishResult",
    "PublishStage",
    "PublishPipeline",
    "StockChartUpdater",
    "fetch_and_merge",
]
