"""Spreadsheet and delimited-text readers built on pandas.

Both readers load the sheet without a header row, treat the first row as
headers, and keep at most ``max_rows`` data rows. Empty cells become empty
strings and fully blank rows are skipped. Rows wider than the header keep
their extra cells.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

import pandas as pd

from dirty_data.analyzer.types import TabularInput
from dirty_data.errors import InputParseError

logger = logging.getLogger(__name__)


def _trim_trailing_blanks(cells: list, keep: int = 0) -> list:
    """Drop empty trailing cells past the first *keep* cells."""
    end = len(cells)
    while end > keep and cells[end - 1] == "":
        end -= 1
    return cells[:end]


def frame_to_table(frame: pd.DataFrame, max_rows: int) -> TabularInput:
    """Split a headerless DataFrame into headers and capped data rows.

    The frame is as wide as its widest row, so padding added past the
    header and past each row's last value is removed again.
    """
    frame = frame.dropna(how="all")
    if frame.empty:
        return TabularInput.from_lists([], [], total_rows=0, truncated=False)

    frame = frame.astype(object).where(pd.notna(frame), "")
    records = frame.values.tolist()

    headers = _trim_trailing_blanks(records[0])
    data_rows = [_trim_trailing_blanks(row, len(headers)) for row in records[1:]]
    total_rows = len(data_rows)
    return TabularInput.from_lists(
        headers,
        data_rows[:max_rows],
        total_rows=total_rows,
        total_cols=len(headers),
        truncated=total_rows > max_rows,
    )


def read_workbook(path: Path, max_rows: int) -> TabularInput:
    """Read the first sheet of an ``.xlsx``/``.xls`` workbook."""
    try:
        frame = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
    except Exception as exc:
        # ValueError for unrecognized formats, engine-specific errors otherwise
        logger.warning("Workbook read failed for %s", path.name, exc_info=True)
        raise InputParseError(f"Could not read workbook {path.name}: {exc}") from exc

    return frame_to_table(frame, max_rows)


def _widest_row(path: Path, sep: str) -> int:
    """Return the field count of the widest record in a delimited file."""
    try:
        with path.open(newline="", encoding="utf-8", errors="replace") as f:
            return max((len(row) for row in csv.reader(f, delimiter=sep)), default=0)
    except csv.Error as exc:
        raise InputParseError(f"Could not parse {path.name}: {exc}") from exc


def read_delimited(path: Path, max_rows: int, sep: str = ",") -> TabularInput:
    """Read a ``.csv`` or ``.tsv`` file, keeping every cell as text.

    Ragged files are accepted: columns are sized to the widest row so no
    record is rejected for carrying more fields than the header.
    """
    width = _widest_row(path, sep)
    if width == 0:
        logger.info("%s is empty", path.name)
        return TabularInput.from_lists([], [], total_rows=0, truncated=False)

    try:
        frame = pd.read_csv(
            path,
            sep=sep,
            header=None,
            names=range(width),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding_errors="replace",
        )
    except pd.errors.EmptyDataError:
        logger.info("%s is empty", path.name)
        return TabularInput.from_lists([], [], total_rows=0, truncated=False)
    except pd.errors.ParserError as exc:
        raise InputParseError(f"Could not parse {path.name}: {exc}") from exc

    return frame_to_table(frame, max_rows)
