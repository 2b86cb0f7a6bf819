"""Append-only ledger of completed analyses."""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from docxcheck.models.history import AnalysisKind, HistoryEntry
from docxcheck.models.user import User

__all__ = ["HistoryLedger", "UnknownIdentityError"]


class UnknownIdentityError(LookupError):
    """Raised when a history entry would reference a missing identity."""


class HistoryLedger:
    """Insert-only access to history entries, keyed by owner."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(
        self,
        *,
        user_id: int,
        kind: AnalysisKind,
        docs: str,
        score: str,
        details: str,
        verdict: str,
    ) -> int:
        """Persist a new entry and return its identifier.

        Args:
            user_id: Owner identity; must already exist.
            kind: Which analysis produced the entry.
            docs: Human-readable label of the analysed document(s).
            score: Score as text, or "-" for kinds without a score.
            details: Free-text details shown alongside the score.
            verdict: Verdict label derived from the score.

        Raises:
            UnknownIdentityError: If ``user_id`` does not reference an identity.
        """
        if self.session.get(User, user_id) is None:
            raise UnknownIdentityError(f"No identity with id {user_id}")

        entry = HistoryEntry(
            user_id=user_id,
            type=kind.value,
            docs=docs,
            score=score,
            details=details,
            verdict=verdict,
        )
        self.session.add(entry)
        self.session.commit()
        return entry.id

    def list_for(self, user_id: int) -> list[HistoryEntry]:
        """Return the identity's entries, most recent first."""
        result = self.session.execute(
            select(HistoryEntry)
            .where(HistoryEntry.user_id == user_id)
            .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())
        )
        return list(result.scalars())
