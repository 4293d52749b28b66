"""Two-pass analysis orchestrator with review-pass failure isolation.

Runs the quantitative primary pass, then the reviewer pass over its
result. The primary pass is all-or-nothing: any failure propagates and no
review is attempted. The review pass is best-effort: its failure is logged
and the combined result falls back to version 1 with ``review=None``.

Public API:
    DualPassAnalyzer(client, settings).analyze(analysis_input, file_name)
        -> CombinedResult
"""

from __future__ import annotations

import logging
from enum import Enum

from dirty_data.analyzer.schemas import (
    CombinedResult,
    DirtyItem,
    PrimaryFinding,
    ReviewFinding,
)
from dirty_data.analyzer.service import run_primary_pass, run_review_pass
from dirty_data.analyzer.types import (
    AnalysisInput,
    DocumentInput,
    ModelClient,
    ModelReply,
    ReviewOutcome,
    TabularInput,
)
from dirty_data.config.settings import AnalysisSettings
from dirty_data.errors import MalformedResponseError, UpstreamError

logger = logging.getLogger(__name__)

__all__ = [
    "AnalysisInput",
    "AnalysisStage",
    "CombinedResult",
    "DirtyItem",
    "DocumentInput",
    "DualPassAnalyzer",
    "ModelClient",
    "ModelReply",
    "PrimaryFinding",
    "ReviewFinding",
    "ReviewOutcome",
    "TabularInput",
]


class AnalysisStage(Enum):
    """Where a single analysis currently is."""

    PRIMARY_IN_FLIGHT = "primary_in_flight"
    PRIMARY_SUCCEEDED = "primary_succeeded"
    REVIEW_IN_FLIGHT = "review_in_flight"
    DONE = "done"
    FAILED = "failed"


class DualPassAnalyzer:
    """Run both passes for one upload at a time.

    Holds only the injected client and settings, so one instance can serve
    any number of sequential or concurrent uploads.
    """

    def __init__(self, client: ModelClient, settings: AnalysisSettings) -> None:
        self.client = client
        self.settings = settings

    def analyze(
        self, analysis_input: AnalysisInput, file_name: str
    ) -> CombinedResult:
        """Analyze one upload.

        Args:
            analysis_input: Parsed sheet or raw document.
            file_name: Upload name, quoted to the model.

        Returns:
            CombinedResult with version 2 when the review succeeded, else 1.

        Raises:
            UpstreamError: The primary model call failed.
            MalformedResponseError: The primary reply did not parse.
        """
        stage = AnalysisStage.PRIMARY_IN_FLIGHT
        logger.debug("Analysis of %s: %s", file_name, stage.value)
        try:
            primary = run_primary_pass(
                self.client, analysis_input, file_name, self.settings
            )
        except (UpstreamError, MalformedResponseError) as exc:
            logger.error(
                "Analysis of %s: %s -> %s: %s",
                file_name,
                stage.value,
                AnalysisStage.FAILED.value,
                exc,
            )
            raise
        logger.debug(
            "Analysis of %s: %s", file_name, AnalysisStage.PRIMARY_SUCCEEDED.value
        )

        stage = AnalysisStage.REVIEW_IN_FLIGHT
        logger.debug("Analysis of %s: %s", file_name, stage.value)
        outcome = run_review_pass(
            self.client, primary, analysis_input, file_name, self.settings
        )

        if outcome.success:
            review = outcome.review
        else:
            logger.warning(
                "Analysis of %s: review pass failed, returning primary only: %s",
                file_name,
                outcome.error,
            )
            review = None

        result = CombinedResult.build(primary, review)
        logger.info(
            "Analysis of %s: %s (version %d)",
            file_name,
            AnalysisStage.DONE.value,
            result.version,
        )
        return result
