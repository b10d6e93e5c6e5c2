"""Quote source interface."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from chartfeed.core.models import SeriesResponse


@runtime_checkable
class QuoteSource(Protocol):
    """Anything able to return one symbol's closing series.

    Implementations report recoverable per-symbol failures as
    :class:`~chartfeed.core.models.MissingSeries` and only raise for errors
    that make the whole batch meaningless.
    """

    name: str

    async def fetch_series(self, symbol: str) -> SeriesResponse: ...
