"""Analysis history store: insert, list, fetch, and delete saved analyses.

The history is an append-only log from the application's point of view:
records are created once after an analysis completes and are never
updated, only listed or deleted.

Every mutation calls session.commit() explicitly -- SQLAlchemy does NOT
auto-commit when the session closes. SQLAlchemy errors are rolled back
and re-raised as PersistenceError; callers decide whether that is fatal.
"""

import logging

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dirty_data.analyzer.schemas import CombinedResult
from dirty_data.errors import PersistenceError

from .models import AnalysisRecord

logger = logging.getLogger(__name__)


def insert_analysis(
    session: Session,
    result: CombinedResult,
    file_name: str,
    file_type: str,
    file_size: str | None = None,
    row_count: int = 0,
    col_count: int = 0,
) -> AnalysisRecord:
    """Persist a completed analysis.

    Args:
        session: Active SQLAlchemy session.
        result: The combined result to save.
        file_name: Original upload name.
        file_type: Normalized type ("xlsx", "csv", "pdf").
        file_size: Human-readable size (e.g. "1.2 KB"), if known.
        row_count: Data rows in the upload (0 for documents).
        col_count: Columns in the upload (0 for documents).

    Returns:
        The new AnalysisRecord with its id populated.

    Raises:
        PersistenceError: If the insert fails.
    """
    primary = result.primary.model_dump()
    record = AnalysisRecord(
        file_name=file_name,
        file_type=file_type,
        file_size=file_size,
        row_count=row_count,
        col_count=col_count,
        version=result.version,
        the_good=primary["the_good"],
        the_bad=primary["the_bad"],
        the_dirty=primary["the_dirty"],
        raw_summary=primary["summary"],
        review_json=result.review.model_dump() if result.review else None,
    )
    try:
        session.add(record)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"Failed to save analysis of {file_name}: {exc}") from exc

    logger.info("Saved analysis %d for %s", record.id, file_name)
    return record


def list_analyses(session: Session, limit: int = 50) -> list[AnalysisRecord]:
    """Return up to *limit* analyses, newest first.

    Raises:
        PersistenceError: If the query fails.
    """
    stmt = (
        select(AnalysisRecord)
        .order_by(desc(AnalysisRecord.created_at), desc(AnalysisRecord.id))
        .limit(limit)
    )
    try:
        return list(session.scalars(stmt).all())
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to list analyses: {exc}") from exc


def get_analysis(session: Session, analysis_id: int) -> AnalysisRecord | None:
    """Look up a saved analysis by primary key."""
    try:
        return session.get(AnalysisRecord, analysis_id)
    except SQLAlchemyError as exc:
        raise PersistenceError(f"Failed to load analysis {analysis_id}: {exc}") from exc


def delete_analysis(session: Session, analysis_id: int) -> bool:
    """Delete a saved analysis.

    Returns:
        True if a record was deleted, False if none had that id.

    Raises:
        PersistenceError: If the delete fails.
    """
    try:
        record = session.get(AnalysisRecord, analysis_id)
        if record is None:
            return False
        session.delete(record)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        raise PersistenceError(f"Failed to delete analysis {analysis_id}: {exc}") from exc

    logger.info("Deleted analysis %d", analysis_id)
    return True
