"""Tests for merging symbol series into the wide table."""

from __future__ import annotations

import pytest

from chartfeed.core.exceptions import NoDataAvailableError
from chartfeed.core.models import MissingSeries, QuotePoint, ValidSeries
from chartfeed.core.services import merge_series, parse_table, serialize_table


def _series(symbol: str, values: dict[str, str]) -> ValidSeries:
    return ValidSeries(
        symbol=symbol,
        points=tuple(QuotePoint(timestamp=ts, value=value, symbol=symbol) for ts, value in values.items()),
    )


def test_shorter_second_series_leaves_trailing_blank() -> None:
    table = merge_series(
        [
            _series("A", {"t1": "10.0", "t2": "11.0"}),
            _series("B", {"t1": "20.0"}),
        ]
    )

    assert serialize_table(table) == "Date|A|B\nt1|10.0|20.0\nt2|11.0|"


def test_missing_symbols_are_dropped_from_header() -> None:
    table = merge_series(
        [
            MissingSeries(symbol="A", reason="no series"),
            _series("B", {"t1": "1"}),
            MissingSeries(symbol="C", reason="rate limited"),
            _series("D", {"t1": "2"}),
        ]
    )

    assert table.header == ["Date", "B", "D"]
    assert table.dropped == ["A", "C"]
    assert all(len(row) == table.width for row in table.rows)


def test_row_order_follows_first_valid_series_not_sorted() -> None:
    table = merge_series(
        [
            MissingSeries(symbol="A", reason="no series"),
            _series("B", {"2024-01-03": "3", "2024-01-01": "1", "2024-01-02": "2"}),
            _series("C", {"2024-01-01": "9", "2024-01-02": "8", "2024-01-03": "7"}),
        ]
    )

    assert [row[0] for row in table.rows] == ["2024-01-03", "2024-01-01", "2024-01-02"]
    assert table.rows[0] == ["2024-01-03", "3", "7"]


def test_timestamps_only_in_later_series_are_not_added() -> None:
    table = merge_series(
        [
            _series("A", {"t1": "1"}),
            _series("B", {"t2": "2", "t3": "3"}),
        ]
    )

    assert len(table) == 1
    assert serialize_table(table) == "Date|A|B\nt1|1|"


def test_row_count_matches_first_valid_series() -> None:
    first = _series("A", {f"t{i}": str(i) for i in range(25)})
    table = merge_series([first, _series("B", {"t3": "x"})])

    assert len(table) == 25
    assert table.records()[3] == {"Date": "t3", "A": "3", "B": "x"}


def test_all_missing_raises_no_data_available() -> None:
    with pytest.raises(NoDataAvailableError) as excinfo:
        merge_series(
            [
                MissingSeries(symbol="A", reason="no series"),
                MissingSeries(symbol="B", reason="timed out"),
            ]
        )

    assert excinfo.value.error_code == "NO_DATA_AVAILABLE"
    assert excinfo.value.reasons == {"A": "no series", "B": "timed out"}


def test_complete_table_splits_back_into_cells() -> None:
    table = merge_series(
        [
            _series("A", {"t1": "1.5", "t2": "1.6"}),
            _series("B", {"t1": "2.5", "t2": "2.6"}),
        ]
    )

    assert parse_table(serialize_table(table)) == [table.header, *table.rows]


def test_delimiter_inside_value_is_not_escaped() -> None:
    table = merge_series([_series("A", {"t1": "1|2"})])

    text = serialize_table(table)

    assert text == "Date|A\nt1|1|2"
    assert len(parse_table(text)[1]) == 3
