"""Database layer -- ORM model, engine factory, session management, and history store."""

from .engine import get_engine, get_session_factory, init_db
from .models import AnalysisRecord, Base
from .store import delete_analysis, get_analysis, insert_analysis, list_analyses

__all__ = [
    "AnalysisRecord",
    "Base",
    "delete_analysis",
    "get_analysis",
    "get_engine",
    "get_session_factory",
    "init_db",
    "insert_analysis",
    "list_analyses",
]
