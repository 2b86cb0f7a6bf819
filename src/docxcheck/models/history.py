# src/docxcheck/models/history.py
"""Append-only audit records of completed analyses."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docxcheck.db.session import Base
from docxcheck.db.time import utcnow

if TYPE_CHECKING:
    from .user import User


class AnalysisKind(str, Enum):
    """Kinds of analysis recorded in the history ledger."""

    SIMILARITY_CHECK = "Similarity Check"
    WEB_SCAN = "Web Scan"
    SUMMARY = "AI Summary"


class HistoryEntry(Base):
    """One completed, schema-valid analysis owned by a user."""

    __tablename__ = "history"
    __table_args__ = (
        Index("ix_history_user_id_created_at", "user_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    docs: Mapped[str] = mapped_column(Text, nullable=False)
    # Numeric score as text, or "-" for kinds without a score.
    score: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    verdict: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    owner: Mapped[User] = relationship("User", back_populates="history")
