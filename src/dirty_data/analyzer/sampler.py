"""Bounded text digests of tabular input for prompt inclusion.

A digest is the header line plus the first ``cap`` data rows, each rendered
as ``Row <n>: a | b | c`` where ``<n>`` is the row's position in the source
sheet (the header is row 1, so data row 0 is "Row 2"). When the source has
more rows than the cap, the digest carries a note citing the total.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from dirty_data.analyzer.types import TabularInput

CELL_SEPARATOR = " | "


@dataclass(frozen=True)
class TableDigest:
    """Rendered sample of a table.

    Attributes:
        header_line: Headers joined with ``" | "``.
        row_lines: One rendered line per sampled row (at most ``cap``).
        total_rows: Data rows in the source table.
        total_cols: Columns in the source table.
        cap: Row cap the digest was built with.
        truncated: True iff ``total_rows > cap``.
    """

    header_line: str
    row_lines: tuple[str, ...]
    total_rows: int
    total_cols: int
    cap: int
    truncated: bool

    @property
    def truncation_note(self) -> str:
        """Note appended to prompts when rows were dropped, else ``""``."""
        if not self.truncated:
            return ""
        return (
            f"[NOTE: File has {self.total_rows} total rows. "
            f"Showing first {self.cap}.]"
        )

    @property
    def rows_text(self) -> str:
        return "\n".join(self.row_lines)


def _render_cell(value: Any) -> str:
    return "" if value is None else str(value)


def render_row(index: int, row: tuple[Any, ...] | list[Any]) -> str:
    """Render data row *index* (0-based) with its 1-indexed sheet position."""
    cells = CELL_SEPARATOR.join(_render_cell(cell) for cell in row)
    return f"Row {index + 2}: {cells}"


def sample_table(table: TabularInput, cap: int) -> TableDigest:
    """Build a digest of at most *cap* rows from *table*.

    The row count used for truncation is the larger of the table's declared
    ``total_rows`` and the rows actually present, so a loader that already
    capped the sheet still reports the true size.

    Args:
        table: Parsed sheet.
        cap: Maximum number of data rows to render.

    Returns:
        TableDigest; empty tables yield empty header and row sections.
    """
    if cap < 0:
        raise ValueError(f"cap must be non-negative, got {cap}")

    total_rows = max(table.total_rows, len(table.rows))
    row_lines = tuple(
        render_row(i, row) for i, row in enumerate(table.rows[:cap])
    )
    return TableDigest(
        header_line=CELL_SEPARATOR.join(_render_cell(h) for h in table.headers),
        row_lines=row_lines,
        total_rows=total_rows,
        total_cols=table.total_cols,
        cap=cap,
        truncated=total_rows > cap,
    )
