"""
Tests for the analysis output schemas: dirty-item normalization and the
version/review invariant.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from dirty_data.analyzer.schemas import (
    CombinedResult,
    DirtyItem,
    PrimaryFinding,
    ReviewFinding,
)

from tests.conftest import PRIMARY_JSON, REVIEW_JSON


def test_dirty_items_normalized_to_text_and_why():
    """Bare strings and {text, why} objects both come out as {text, why}."""
    finding = PrimaryFinding.model_validate(PRIMARY_JSON)
    dumped = finding.model_dump()["the_dirty"]
    assert dumped == [
        {"text": "Row 3 Amount is -50000000", "why": "Five orders of magnitude below Row 2"},
        {"text": "Amount column stored as text", "why": None},
    ]


def test_dirty_item_without_why_key():
    assert DirtyItem.model_validate({"text": "odd"}).why is None


def test_dirty_item_rejects_non_text():
    with pytest.raises(ValidationError):
        DirtyItem.model_validate(42)


def test_primary_requires_all_sections():
    incomplete = {k: v for k, v in PRIMARY_JSON.items() if k != "summary"}
    with pytest.raises(ValidationError):
        PrimaryFinding.model_validate(incomplete)


def test_list_bounds_are_not_enforced():
    """More than five items passes through unchanged."""
    data = dict(PRIMARY_JSON, the_good=[f"g{i}" for i in range(9)], the_bad=[])
    finding = PrimaryFinding.model_validate(data)
    assert len(finding.the_good) == 9
    assert finding.the_bad == []


def test_review_watch_outs_default_empty():
    review = ReviewFinding.model_validate(
        {"co_signs": ["a"], "bottom_line": "Fine."}
    )
    assert review.watch_outs == []


def test_build_sets_version_from_review():
    primary = PrimaryFinding.model_validate(PRIMARY_JSON)
    review = ReviewFinding.model_validate(REVIEW_JSON)
    assert CombinedResult.build(primary, review).version == 2
    assert CombinedResult.build(primary, None).version == 1


@pytest.mark.parametrize(
    "version,with_review", [(2, False), (1, True), (3, True)]
)
def test_inconsistent_version_rejected(version, with_review):
    primary = PrimaryFinding.model_validate(PRIMARY_JSON)
    review = ReviewFinding.model_validate(REVIEW_JSON) if with_review else None
    with pytest.raises(ValidationError):
        CombinedResult(version=version, primary=primary, review=review)


def test_to_response_shape():
    primary = PrimaryFinding.model_validate(PRIMARY_JSON)
    body = CombinedResult.build(primary, None).to_response()
    assert set(body) == {"version", "anderson", "rybo"}
    assert body["version"] == 1
    assert body["rybo"] is None
    assert body["anderson"]["summary"] == PRIMARY_JSON["summary"]
    assert body["anderson"]["the_dirty"][1] == {
        "text": "Amount column stored as text",
        "why": None,
    }
