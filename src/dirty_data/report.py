"""Plain-text rendering of analysis results for the terminal."""

from __future__ import annotations

import datetime
import textwrap

from dirty_data.analyzer.schemas import CombinedResult

_WIDTH = 78


def format_size(num_bytes: int) -> str:
    """Format a byte count as ``B``, ``KB``, or ``MB`` with one decimal."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1_048_576:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / 1_048_576:.1f} MB"


def format_timestamp(value: datetime.datetime) -> str:
    """Format like ``Jan 5, 2024 - 3:07 PM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return (
        f"{value.strftime('%b')} {value.day}, {value.year} - "
        f"{hour}:{value.minute:02d} {meridiem}"
    )


def _bullet(text: str, marker: str = "-") -> list[str]:
    return textwrap.wrap(
        text,
        width=_WIDTH,
        initial_indent=f"  {marker} ",
        subsequent_indent=" " * (len(marker) + 3),
    ) or [f"  {marker}"]


def _section(title: str, lines: list[str]) -> list[str]:
    return ["", title, "-" * len(title), *lines]


def render_report(
    result: CombinedResult,
    file_name: str,
    file_type: str = "",
    file_size: str | None = None,
    row_count: int = 0,
    col_count: int = 0,
    truncated: bool = False,
    timestamp: datetime.datetime | None = None,
) -> str:
    """Render *result* as a plain-text report.

    The review sections appear only for version 2 results.
    """
    primary = result.primary

    meta = [file_type.upper()] if file_type else []
    if file_size:
        meta.append(file_size)
    if row_count or col_count:
        meta.append(f"{row_count} rows x {col_count} cols")
    if truncated:
        meta.append("sampled")
    if timestamp is not None:
        meta.append(format_timestamp(timestamp))

    lines = [f"THE DOWN & DIRTY ON {file_name}"]
    if meta:
        lines.append(" | ".join(meta))
    lines.extend(textwrap.wrap(primary.summary, width=_WIDTH) or [""])

    good = [line for item in primary.the_good for line in _bullet(item, "+")]
    lines += _section("THE GOOD", good)

    bad = [line for item in primary.the_bad for line in _bullet(item, "!")]
    lines += _section("THE BAD", bad)

    dirty: list[str] = []
    for item in primary.the_dirty:
        dirty.extend(_bullet(item.text, "*"))
        if item.why:
            dirty.extend(
                textwrap.wrap(
                    f"why: {item.why}",
                    width=_WIDTH,
                    initial_indent="      ",
                    subsequent_indent="      ",
                )
            )
    lines += _section("THE DIRTY", dirty)

    if result.review is not None:
        review = result.review
        lines += _section(
            "SECOND OPINION: CO-SIGNS",
            [line for item in review.co_signs for line in _bullet(item)],
        )
        if review.watch_outs:
            lines += _section(
                "SECOND OPINION: WATCH OUTS",
                [line for item in review.watch_outs for line in _bullet(item)],
            )
        lines += _section(
            "BOTTOM LINE", textwrap.wrap(review.bottom_line, width=_WIDTH)
        )

    return "\n".join(lines) + "\n"
