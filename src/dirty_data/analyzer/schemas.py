"""Pydantic v2 models for validating LLM analysis output.

These schemas define the contract between the model's JSON reply and
downstream consumers (HTTP responses, the history database, the text
report). Primary output must validate against PrimaryFinding and review
output against ReviewFinding before either is accepted.

List lengths requested in the prompts (2-5 items, 1-3 co-signs, ...) are
not enforced here; whatever the model returns is passed through.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator


class DirtyItem(BaseModel):
    """One "dirty" finding, normalized to ``{text, why}``.

    The model is asked for ``{"text": ..., "why": ...}`` objects but
    sometimes returns bare strings. Both shapes are accepted at parse time
    and a bare string becomes ``{"text": <string>, "why": None}``, so
    nothing downstream needs to check which shape arrived.

    Attributes:
        text: The finding itself.
        why: Explanation of why it matters (None when the model gave none).
    """

    text: str
    why: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_string(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"text": value, "why": None}
        return value


class PrimaryFinding(BaseModel):
    """Quantitative first-pass analysis.

    Attributes:
        the_good: Data quality wins and patterns that check out.
        the_bad: Statistical red flags and data quality issues.
        the_dirty: Things that don't add up, each with an optional reason.
        summary: One sentence describing what the data contains.
    """

    the_good: list[str]
    the_bad: list[str]
    the_dirty: list[DirtyItem]
    summary: str


class ReviewFinding(BaseModel):
    """Second-opinion review of a PrimaryFinding.

    Attributes:
        co_signs: The primary pass's best calls and why they matter.
        watch_outs: What the primary pass missed or got wrong (may be empty).
        bottom_line: Plain-English paragraph on what the data means.
    """

    co_signs: list[str]
    watch_outs: list[str] = Field(default_factory=list)
    bottom_line: str


class CombinedResult(BaseModel):
    """Primary finding plus the optional review.

    ``version`` is 2 exactly when ``review`` is present. Use
    :meth:`build` rather than choosing the version by hand.
    """

    version: Literal[1, 2]
    primary: PrimaryFinding
    review: ReviewFinding | None = None

    @model_validator(mode="after")
    def _version_matches_review(self) -> CombinedResult:
        expected = 2 if self.review is not None else 1
        if self.version != expected:
            raise ValueError(
                f"version {self.version} does not match review presence "
                f"(expected {expected})"
            )
        return self

    @classmethod
    def build(
        cls, primary: PrimaryFinding, review: ReviewFinding | None
    ) -> CombinedResult:
        return cls(
            version=2 if review is not None else 1,
            primary=primary,
            review=review,
        )

    def to_response(self) -> dict[str, Any]:
        """Return the wire shape sent to HTTP clients."""
        return {
            "version": self.version,
            "anderson": self.primary.model_dump(),
            "rybo": self.review.model_dump() if self.review is not None else None,
        }
