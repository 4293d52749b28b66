"""
Pytest fixtures: scripted model client, settings, temporary SQLite history.
"""

from __future__ import annotations

import json

import pytest

from dirty_data.analyzer import DualPassAnalyzer
from dirty_data.analyzer.types import ModelReply
from dirty_data.config.settings import AnalysisSettings, PipelineSettings
from dirty_data.db import get_engine, get_session_factory, init_db
from dirty_data.service import AnalysisService

PRIMARY_JSON = {
    "the_good": ["Dates are consistently ISO formatted", "No missing values"],
    "the_bad": ["Only two rows of data", "No currency column"],
    "the_dirty": [
        {"text": "Row 3 Amount is -50000000", "why": "Five orders of magnitude below Row 2"},
        "Amount column stored as text",
    ],
    "summary": "A two-row ledger of dated amounts with one extreme negative outlier.",
}

REVIEW_JSON = {
    "co_signs": ["The -50000000 outlier is the whole story here"],
    "watch_outs": ["Two rows is too few to call anything a trend"],
    "bottom_line": (
        "The -50,000,000 entry in Row 3 is almost certainly a typo or a "
        "misplaced decimal. Fix it before anyone sums this column."
    ),
}


class ScriptedClient:
    """Model client that replays queued replies and records each call.

    Queue items are either reply text or an exception instance to raise.
    """

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    def invoke(self, system, messages, max_tokens):
        self.calls.append(
            {"system": system, "messages": messages, "max_tokens": max_tokens}
        )
        if not self.replies:
            raise AssertionError("ScriptedClient ran out of replies")
        item = self.replies.pop(0)
        if isinstance(item, BaseException):
            raise item
        return ModelReply(text=item, model="scripted")


@pytest.fixture
def primary_text():
    return json.dumps(PRIMARY_JSON)


@pytest.fixture
def review_text():
    return json.dumps(REVIEW_JSON)


@pytest.fixture
def analysis_settings():
    return AnalysisSettings(
        api_key="test-key",
        primary_row_cap=100,
        review_row_cap=50,
        primary_max_tokens=4000,
        review_max_tokens=3000,
    )


@pytest.fixture
def pipeline_settings(tmp_path):
    return PipelineSettings(
        db_path=str(tmp_path / "analyses.db"),
        log_dir=str(tmp_path / "logs"),
        max_upload_rows=500,
        history_limit=50,
    )


@pytest.fixture
def session_factory(pipeline_settings):
    engine = get_engine(pipeline_settings.db_path)
    init_db(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def make_service(analysis_settings, pipeline_settings, session_factory):
    """Build an AnalysisService around a ScriptedClient with the given replies."""

    def _make(*replies):
        client = ScriptedClient(*replies)
        analyzer = DualPassAnalyzer(client, analysis_settings)
        return AnalysisService(analyzer, session_factory, pipeline_settings), client

    return _make
