"""Request-level service: analyze an upload, then save it best-effort.

Ties the analyzer to the history store. The analysis result is the only
thing that can fail a request; saving happens after both passes and a
save failure is logged and reported alongside the result, never instead
of it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.orm import Session, sessionmaker

from dirty_data.analyzer import DualPassAnalyzer
from dirty_data.analyzer.schemas import CombinedResult
from dirty_data.analyzer.types import AnalysisInput
from dirty_data.config.settings import PipelineSettings
from dirty_data.db.models import AnalysisRecord
from dirty_data.db.store import delete_analysis, insert_analysis, list_analyses
from dirty_data.errors import PersistenceError
from dirty_data.loader import Upload, load_upload
from dirty_data.report import format_size

logger = logging.getLogger(__name__)


@dataclass
class AnalysisRun:
    """Outcome of one analyzed upload.

    Attributes:
        result: The combined analysis.
        record_id: Id of the saved history record (None if not saved).
        save_error: Why saving failed, if it did.
    """

    result: CombinedResult
    record_id: int | None = None
    save_error: str | None = None


class AnalysisService:
    """Analyze uploads and manage the analysis history."""

    def __init__(
        self,
        analyzer: DualPassAnalyzer | None,
        session_factory: sessionmaker[Session],
        pipeline: PipelineSettings,
    ) -> None:
        self.analyzer = analyzer
        self.session_factory = session_factory
        self.pipeline = pipeline

    def analyze(
        self,
        analysis_input: AnalysisInput,
        file_name: str,
        file_type: str,
        file_size: str | None = None,
        row_count: int = 0,
        col_count: int = 0,
        save: bool = True,
    ) -> AnalysisRun:
        """Run both passes on *analysis_input* and optionally save the result.

        Raises:
            UpstreamError: The primary model call failed.
            MalformedResponseError: The primary reply did not parse.
            RuntimeError: The service was built without an analyzer.
        """
        if self.analyzer is None:
            raise RuntimeError(
                "AnalysisService was built without an analyzer; "
                "it can only list and delete history"
            )
        result = self.analyzer.analyze(analysis_input, file_name)
        run = AnalysisRun(result=result)
        if not save:
            return run

        try:
            with self.session_factory() as session:
                record = insert_analysis(
                    session,
                    result,
                    file_name=file_name,
                    file_type=file_type,
                    file_size=file_size,
                    row_count=row_count,
                    col_count=col_count,
                )
                run.record_id = record.id
        except PersistenceError as exc:
            logger.error("Analysis of %s not saved: %s", file_name, exc)
            run.save_error = str(exc)
        return run

    def analyze_upload(self, upload: Upload, save: bool = True) -> AnalysisRun:
        return self.analyze(
            upload.analysis_input,
            file_name=upload.file_name,
            file_type=upload.file_type,
            file_size=format_size(upload.size_bytes),
            row_count=upload.row_count,
            col_count=upload.col_count,
            save=save,
        )

    def analyze_file(self, path: Path, save: bool = True) -> tuple[Upload, AnalysisRun]:
        """Load *path* from disk and analyze it.

        Raises:
            UnsupportedInputError: Unknown extension.
            InputParseError: The file could not be read.
        """
        upload = load_upload(path, max_rows=self.pipeline.max_upload_rows)
        return upload, self.analyze_upload(upload, save=save)

    def history(self, limit: int | None = None) -> list[AnalysisRecord]:
        """Return saved analyses, newest first; an empty list if the store fails."""
        limit = self.pipeline.history_limit if limit is None else limit
        try:
            with self.session_factory() as session:
                return list_analyses(session, limit=limit)
        except PersistenceError as exc:
            logger.error("Could not load analysis history: %s", exc)
            return []

    def delete(self, analysis_id: int) -> bool:
        """Delete a saved analysis; False if it did not exist.

        Raises:
            PersistenceError: The delete itself failed.
        """
        with self.session_factory() as session:
            return delete_analysis(session, analysis_id)
