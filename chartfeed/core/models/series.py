"""Quote and per-symbol series models."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict


class QuotePoint(BaseModel):
    """One closing value for a symbol at a timestamp.

    ``timestamp`` is kept as the opaque string the quote source returned and
    ``value`` as its decimal text, so the merged table reproduces them exactly.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: str
    value: str
    symbol: str


@dataclass(frozen=True, slots=True)
class ValidSeries:
    """A symbol's fetch that produced quotes, in response order."""

    symbol: str
    points: tuple[QuotePoint, ...]

    @property
    def timestamps(self) -> list[str]:
        return [point.timestamp for point in self.points]

    def by_timestamp(self) -> dict[str, str]:
        return {point.timestamp: point.value for point in self.points}


@dataclass(frozen=True, slots=True)
class MissingSeries:
    """Degraded result: the symbol was dropped, the batch carried on."""

    symbol: str
    reason: str
    cause: BaseException | None = field(default=None, compare=False)


SeriesResponse = ValidSeries | MissingSeries


__all__ = ["QuotePoint", "ValidSeries", "MissingSeries", "SeriesResponse"]
