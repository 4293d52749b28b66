"""Core pass logic: model invocation, fence stripping, and response parsing.

Each pass sends one system-prompted request, strips markdown code fences
from the reply, and validates the JSON against its schema. The primary
pass raises on any failure. The review pass never raises: it returns a
ReviewOutcome carrying either the finding or the reason it is missing.
"""

from __future__ import annotations

import logging
import re
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from dirty_data.analyzer.prompt import (
    PRIMARY_PROMPT,
    REVIEW_PROMPT,
    build_primary_message,
    build_review_message,
    load_prompt_template,
)
from dirty_data.analyzer.schemas import PrimaryFinding, ReviewFinding
from dirty_data.analyzer.types import AnalysisInput, ModelClient, ReviewOutcome
from dirty_data.config.settings import AnalysisSettings
from dirty_data.errors import MalformedResponseError, UpstreamError

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^\s*```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")

_ModelT = TypeVar("_ModelT", bound=BaseModel)

# Item counts the prompts ask for. Replies outside them are kept as-is.
PRIMARY_LIST_BOUNDS = {"the_good": (2, 5), "the_bad": (2, 5), "the_dirty": (2, 5)}
REVIEW_LIST_BOUNDS = {"co_signs": (1, 3), "watch_outs": (0, 4)}


def note_list_bounds(
    finding: BaseModel, bounds: dict[str, tuple[int, int]], file_name: str
) -> list[str]:
    """Log a debug note for each list field outside its advisory bounds.

    Returns:
        Names of the out-of-bound fields (empty if all are in range).
    """
    outside = []
    for field, (low, high) in bounds.items():
        count = len(getattr(finding, field))
        if not low <= count <= high:
            logger.debug(
                "%s for %s has %d items in %s (expected %d-%d); keeping as-is",
                type(finding).__name__,
                file_name,
                count,
                field,
                low,
                high,
            )
            outside.append(field)
    return outside


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping JSON content.

    Handles ``\\`\\`\\`json ... \\`\\`\\``` and bare ``\\`\\`\\` ... \\`\\`\\```
    wrappers, including a lone opening or closing fence. Returns the inner
    content stripped of whitespace; text without fences is only stripped.

    Args:
        text: Raw text that may be wrapped in code fences.

    Returns:
        The unwrapped content.
    """
    text = _LEADING_FENCE_RE.sub("", text, count=1)
    text = _TRAILING_FENCE_RE.sub("", text, count=1)
    return text.strip()


def parse_model_json(raw_text: str, schema: type[_ModelT]) -> _ModelT:
    """Strip fences from *raw_text* and validate it against *schema*.

    Raises:
        MalformedResponseError: If the text is not JSON or has the wrong shape.
    """
    cleaned = strip_code_fences(raw_text)
    try:
        return schema.model_validate_json(cleaned)
    except ValidationError as exc:
        msg = f"{schema.__name__} validation error: {str(exc)[:200]}"
        raise MalformedResponseError(msg, raw_text=raw_text) from exc


def run_primary_pass(
    client: ModelClient,
    analysis_input: AnalysisInput,
    file_name: str,
    settings: AnalysisSettings,
) -> PrimaryFinding:
    """Run the quantitative first pass.

    Raises:
        UpstreamError: The model call failed.
        MalformedResponseError: The reply did not parse as a PrimaryFinding.
    """
    system_prompt, version_hash = load_prompt_template(PRIMARY_PROMPT)
    message = build_primary_message(
        analysis_input, file_name, settings.primary_row_cap
    )

    logger.info(
        "Primary pass for %s (prompt %s, max_tokens=%d)",
        file_name,
        version_hash,
        settings.primary_max_tokens,
    )
    reply = client.invoke(system_prompt, [message], settings.primary_max_tokens)
    finding = parse_model_json(reply.text, PrimaryFinding)
    note_list_bounds(finding, PRIMARY_LIST_BOUNDS, file_name)

    logger.info(
        "Primary pass for %s parsed: %d good, %d bad, %d dirty",
        file_name,
        len(finding.the_good),
        len(finding.the_bad),
        len(finding.the_dirty),
    )
    return finding


def run_review_pass(
    client: ModelClient,
    primary: PrimaryFinding,
    analysis_input: AnalysisInput,
    file_name: str,
    settings: AnalysisSettings,
) -> ReviewOutcome:
    """Run the reviewer pass over a successful primary finding.

    Every failure, expected or not, is converted into a ReviewOutcome with
    ``review=None`` so the caller can keep the primary result.
    """
    raw_text = ""
    try:
        system_prompt, version_hash = load_prompt_template(REVIEW_PROMPT)
        message = build_review_message(
            primary, analysis_input, file_name, settings.review_row_cap
        )
        logger.info(
            "Review pass for %s (prompt %s, max_tokens=%d)",
            file_name,
            version_hash,
            settings.review_max_tokens,
        )
        reply = client.invoke(system_prompt, [message], settings.review_max_tokens)
        raw_text = reply.text
        review = parse_model_json(raw_text, ReviewFinding)
        note_list_bounds(review, REVIEW_LIST_BOUNDS, file_name)
    except UpstreamError as exc:
        return ReviewOutcome(error=f"upstream_error: {exc}")
    except MalformedResponseError as exc:
        return ReviewOutcome(error=f"malformed_response: {exc}", raw_response=raw_text)
    except Exception as exc:
        logger.exception("Unexpected error in review pass for %s", file_name)
        return ReviewOutcome(error=f"unexpected_error: {exc}", raw_response=raw_text)

    return ReviewOutcome(review=review, raw_response=raw_text)
