"""Pipe-delimited text form of a merged table.

Fields are joined without quoting or escaping, so a value containing the
delimiter produces a row with extra fields.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from chartfeed.core.models import MergedTable

DELIMITER = "|"


def join_rows(header: Sequence[str], rows: Iterable[Sequence[object]], delimiter: str = DELIMITER) -> str:
    """Render header and rows, one per line, with no trailing newline.

    ``None`` cells become empty fields.
    """
    lines = [delimiter.join(header)]
    for row in rows:
        lines.append(delimiter.join("" if cell is None else str(cell) for cell in row))
    return "\n".join(lines)


def serialize_table(table: MergedTable, delimiter: str = DELIMITER) -> str:
    """Render a merged table as uploaded to charts."""
    return join_rows(table.header, table.rows, delimiter)


def parse_table(text: str, delimiter: str = DELIMITER) -> list[list[str]]:
    """Split serialized text back into rows of fields."""
    if not text:
        return []
    return [line.split(delimiter) for line in text.split("\n")]


__all__ = ["DELIMITER", "join_rows", "serialize_table", "parse_table"]
