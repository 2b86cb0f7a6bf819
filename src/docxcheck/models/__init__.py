# src/docxcheck/models/__init__.py
"""SQLAlchemy models for the DocxCheck service."""

from .history import AnalysisKind, HistoryEntry
from .user import User

__all__ = [
    "AnalysisKind", "HistoryEntry",
    "User",
]
