"""Wide table produced by merging symbol series."""

from __future__ import annotations

from dataclasses import dataclass, field

DATE_COLUMN = "Date"


@dataclass(slots=True)
class MergedTable:
    """Header plus rows keyed by timestamp.

    Every row has ``len(header)`` cells; ``None`` marks a symbol without a
    quote at that timestamp.
    """

    symbols: list[str]
    rows: list[list[str | None]] = field(default_factory=list)
    dropped: list[str] = field(default_factory=list)

    @property
    def header(self) -> list[str]:
        return [DATE_COLUMN, *self.symbols]

    @property
    def width(self) -> int:
        return 1 + len(self.symbols)

    def __len__(self) -> int:
        return len(self.rows)

    def records(self) -> list[dict[str, str | None]]:
        """Rows as dictionaries keyed by header name."""
        header = self.header
        return [dict(zip(header, row, strict=True)) for row in self.rows]


__all__ = ["DATE_COLUMN", "MergedTable"]
