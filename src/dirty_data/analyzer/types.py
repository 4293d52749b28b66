"""Shared types for the two-pass analysis pipeline.

Defines the request-scoped inputs (TabularInput, DocumentInput), the reply
returned by a model client, and the explicit outcome of the review pass.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from dirty_data.analyzer.schemas import ReviewFinding

PDF_MEDIA_TYPE = "application/pdf"


@dataclass(frozen=True)
class TabularInput:
    """A parsed sheet: header row plus (possibly already capped) data rows.

    Attributes:
        headers: Column headers in source order.
        rows: Data rows in source order; cells are rendered with ``str()``.
        total_rows: Data rows in the source file, which may exceed
                    ``len(rows)`` when the loader kept only a prefix.
        total_cols: Column count reported by the loader.
        truncated: Whether the loader dropped rows.
    """

    headers: tuple[Any, ...] = ()
    rows: tuple[tuple[Any, ...], ...] = ()
    total_rows: int = 0
    total_cols: int = 0
    truncated: bool = False

    @classmethod
    def from_lists(
        cls,
        headers: list[Any],
        rows: list[list[Any]],
        total_rows: int | None = None,
        total_cols: int | None = None,
        truncated: bool | None = None,
    ) -> TabularInput:
        """Build an immutable table, filling in counts the caller omitted."""
        row_count = len(rows) if total_rows is None else total_rows
        return cls(
            headers=tuple(headers),
            rows=tuple(tuple(row) for row in rows),
            total_rows=row_count,
            total_cols=len(headers) if total_cols is None else total_cols,
            truncated=row_count > len(rows) if truncated is None else truncated,
        )


@dataclass(frozen=True)
class DocumentInput:
    """An opaque document forwarded to the model as-is."""

    data: bytes
    media_type: str = PDF_MEDIA_TYPE

    @property
    def base64_data(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


AnalysisInput = Union[TabularInput, DocumentInput]


@dataclass
class ModelReply:
    """Text and usage metadata returned by a single model call."""

    text: str
    model: str = ""
    input_tokens: int | None = None
    output_tokens: int | None = None


class ModelClient(Protocol):
    """Anything that can run one system-prompted model call."""

    def invoke(
        self,
        system: str,
        messages: list[dict[str, Any]],
        max_tokens: int,
    ) -> ModelReply: ...


@dataclass
class ReviewOutcome:
    """Result of the review pass: a finding, or the error that replaced it.

    Attributes:
        review: The parsed review (None on failure).
        error: Description of why the review is missing.
        raw_response: Raw model text, when a reply was received.
    """

    review: ReviewFinding | None = None
    error: str | None = None
    raw_response: str = field(default="", repr=False)

    @property
    def success(self) -> bool:
        return self.review is not None
