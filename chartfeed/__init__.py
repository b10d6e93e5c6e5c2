"""chartfeed - fetch stock closing prices and keep a published chart up to date."""

from chartfeed.core import (
    ChartfeedConfig,
    ConfigManager,
    MergedTable,
    PublishPipeline,
    PublishResult,
    PublishStage,
    StockChartUpdater,
    fetch_and_merge,
)

__version__ = "0.1.0"

__all__ = [
    "ChartfeedConfig",
    "ConfigManager",
    "MergedTable",
    "PublishPipeline",
    "PublishResult",
    "PublishStage",
    "StockChartUpdater",
    "fetch_and_merge",
    "__version__",
]
