"""
Tests for the table sampler: row labels, caps, truncation notes, empty tables.
"""

from __future__ import annotations

import pytest

from dirty_data.analyzer.sampler import render_row, sample_table
from dirty_data.analyzer.types import TabularInput


def _table(n_rows: int, n_cols: int = 2) -> TabularInput:
    headers = [f"col{c}" for c in range(n_cols)]
    rows = [[f"r{r}c{c}" for c in range(n_cols)] for r in range(n_rows)]
    return TabularInput.from_lists(headers, rows)


def test_row_labels_start_at_two():
    """Data row i renders as 'Row {i+2}' because the header is sheet row 1."""
    digest = sample_table(_table(3), cap=100)
    assert digest.row_lines == (
        "Row 2: r0c0 | r0c1",
        "Row 3: r1c0 | r1c1",
        "Row 4: r2c0 | r2c1",
    )
    assert render_row(41, ["a", "b"]) == "Row 43: a | b"


def test_header_line_joined_with_pipes():
    digest = sample_table(TabularInput.from_lists(["Date", "Amount"], []), cap=10)
    assert digest.header_line == "Date | Amount"


@pytest.mark.parametrize("n_rows", [0, 1, 99, 100])
def test_not_truncated_at_or_below_cap(n_rows):
    digest = sample_table(_table(n_rows), cap=100)
    assert digest.truncated is False
    assert len(digest.row_lines) == n_rows
    assert digest.truncation_note == ""


@pytest.mark.parametrize("n_rows", [101, 250, 600])
def test_truncated_above_cap_keeps_exactly_cap_rows(n_rows):
    digest = sample_table(_table(n_rows), cap=100)
    assert digest.truncated is True
    assert len(digest.row_lines) == 100
    assert digest.row_lines[-1].startswith("Row 101: ")


def test_600_row_table_note_cites_total():
    digest = sample_table(_table(600), cap=100)
    assert digest.truncated is True
    assert digest.total_rows == 600
    assert "600 total rows" in digest.truncation_note
    assert "first 100" in digest.truncation_note


def test_declared_total_counts_when_loader_already_capped():
    """A loader that kept 500 of 2000 rows still yields a note citing 2000."""
    rows = [["x"]] * 500
    table = TabularInput.from_lists(["h"], rows, total_rows=2000, truncated=True)
    digest = sample_table(table, cap=50)
    assert digest.truncated is True
    assert len(digest.row_lines) == 50
    assert "2000 total rows" in digest.truncation_note


def test_empty_table_renders_empty_sections():
    digest = sample_table(TabularInput.from_lists([], []), cap=100)
    assert digest.header_line == ""
    assert digest.row_lines == ()
    assert digest.rows_text == ""
    assert digest.truncated is False


def test_none_and_numeric_cells():
    table = TabularInput.from_lists(["a", "b", "c"], [[None, 3.5, 7]])
    assert sample_table(table, cap=5).row_lines == ("Row 2:  | 3.5 | 7",)


def test_negative_cap_rejected():
    with pytest.raises(ValueError):
        sample_table(_table(1), cap=-1)
