"""Smoke test: one live two-pass analysis against the Anthropic API.

Runs a tiny ledger through the real model with strict constraints:
- One upload, two model calls (primary + review), no retries
- All outputs isolated to smoke-test paths under data/ and logs/
- Skipped unless an API key is configured

Usage:
    ANALYSIS_API_KEY=... pytest tests/smoke -s
"""

from __future__ import annotations

import logging
import os
import shutil

import pytest

from dirty_data.analyzer import DualPassAnalyzer
from dirty_data.analyzer.client import AnthropicModelClient
from dirty_data.config.settings import PROJECT_ROOT, AnalysisSettings, PipelineSettings
from dirty_data.db import get_engine, get_session_factory, init_db
from dirty_data.logging import setup_logging
from dirty_data.report import render_report
from dirty_data.service import AnalysisService

logger = logging.getLogger(__name__)

SMOKE_DB_PATH = "data/smoke/analyses.db"
SMOKE_LOG_DIR = "logs/smoke"

LEDGER_CSV = "Date,Amount,Memo\n2024-01-01,100,Coffee\n2024-01-02,-50000000,Refund\n2024-01-03,120,Lunch\n"

pytestmark = pytest.mark.skipif(
    not (os.environ.get("ANALYSIS_API_KEY") or os.environ.get("ANTHROPIC_API_KEY")),
    reason="live smoke test needs ANALYSIS_API_KEY or ANTHROPIC_API_KEY",
)


def test_live_ledger_analysis(tmp_path):
    # Clean previous smoke data for a fresh run
    for rel in ("data/smoke", SMOKE_LOG_DIR):
        target = PROJECT_ROOT / rel
        if target.exists():
            shutil.rmtree(target)

    pipeline = PipelineSettings(
        db_path=str(PROJECT_ROOT / SMOKE_DB_PATH),
        log_dir=str(PROJECT_ROOT / SMOKE_LOG_DIR),
    )
    setup_logging(log_dir=pipeline.log_dir)
    analysis = AnalysisSettings()

    engine = get_engine(pipeline.db_path)
    init_db(engine)
    service = AnalysisService(
        DualPassAnalyzer(AnthropicModelClient.from_settings(analysis), analysis),
        get_session_factory(engine),
        pipeline,
    )

    path = tmp_path / "ledger.csv"
    path.write_text(LEDGER_CSV)
    try:
        upload, run = service.analyze_file(path)
    finally:
        engine.dispose()

    logger.info("Smoke run: version=%d, saved=%s", run.result.version, run.record_id)
    print(render_report(run.result, upload.file_name, upload.file_type))

    primary = run.result.primary
    assert primary.the_good and primary.the_bad and primary.the_dirty
    assert primary.summary.strip()
    assert run.result.version == (2 if run.result.review else 1)
    assert run.record_id is not None
