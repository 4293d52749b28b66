"""SQLAlchemy 2.0 ORM models for analysis history.

Models:
    AnalysisRecord -- One completed analysis: upload metadata, the primary
                      finding's sections, and the optional review.
"""

import datetime
from typing import Any, Optional

from sqlalchemy import JSON, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class AnalysisRecord(Base):
    """A saved analysis, listed newest first in the history view."""

    __tablename__ = "analyses"

    id: Mapped[int] = mapped_column(primary_key=True)
    file_name: Mapped[str] = mapped_column(String(500))
    file_type: Mapped[str] = mapped_column(String(10))  # "xlsx", "csv", "pdf"
    file_size: Mapped[Optional[str]] = mapped_column(String(20), default=None)
    row_count: Mapped[int] = mapped_column(default=0)
    col_count: Mapped[int] = mapped_column(default=0)

    version: Mapped[int] = mapped_column(default=1)
    the_good: Mapped[list[str]] = mapped_column(JSON, default=list)
    the_bad: Mapped[list[str]] = mapped_column(JSON, default=list)
    # Always stored as [{"text": ..., "why": ... | null}, ...]
    the_dirty: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    raw_summary: Mapped[str] = mapped_column(Text, default="")
    review_json: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, default=None)

    created_at: Mapped[datetime.datetime] = mapped_column(
        server_default=func.now(), index=True
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "file_name": self.file_name,
            "file_type": self.file_type,
            "file_size": self.file_size,
            "row_count": self.row_count,
            "col_count": self.col_count,
            "version": self.version,
            "the_good": self.the_good or [],
            "the_bad": self.the_bad or [],
            "the_dirty": self.the_dirty or [],
            "raw_summary": self.raw_summary or "",
            "review": self.review_json,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<AnalysisRecord(id={self.id}, file_name={self.file_name!r})>"
