"""Quote sources."""

from chartfeed.core.providers.alpha_vantage import AlphaVantageQuoteSource
from chartfeed.core.providers.base import QuoteSource

__all__ = ["QuoteSource", "AlphaVantageQuoteSource"]
