# src/docxcheck/models/user.py
"""SQLAlchemy model for phone-keyed identities and their OTP challenge."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docxcheck.db.session import Base
from docxcheck.db.time import utcnow

if TYPE_CHECKING:
    from .history import HistoryEntry


class User(Base):
    """Identity keyed by phone number.

    The pending OTP challenge lives on the same row: ``otp_code`` and
    ``otp_expires_at`` are written together and cleared together.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    phone: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    otp_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    otp_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    history: Mapped[list[HistoryEntry]] = relationship(
        "HistoryEntry",
        back_populates="owner",
        passive_deletes=True,
    )

    @property
    def has_active_challenge(self) -> bool:
        """Return True if a challenge code and expiry are both set."""
        return self.otp_code is not None and self.otp_expires_at is not None
