"""Data models."""

from chartfeed.core.models.publish import PipelineState, PublishResult, PublishStage
from chartfeed.core.models.series import MissingSeries, QuotePoint, SeriesResponse, ValidSeries
from chartfeed.core.models.table import DATE_COLUMN, MergedTable

__all__ = [
    "QuotePoint",
    "ValidSeries",
    "MissingSeries",
    "SeriesResponse",
    "DATE_COLUMN",
    "MergedTable",
    "PublishStage",
    "PipelineState",
    "PublishResult",
]
