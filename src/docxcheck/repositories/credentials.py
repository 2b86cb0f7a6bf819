"""Durable mapping of phone numbers to their current OTP challenge."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docxcheck.models.user import User

__all__ = ["CredentialStore"]


class CredentialStore:
    """Thin wrapper around database access for identities and challenges."""

    def __init__(self, session: Session) -> None:
        """Initialize the store with a SQLAlchemy session."""
        self.session = session

    def get_by_phone(self, phone: str) -> User | None:
        """Return the identity registered for a phone number."""
        result = self.session.execute(select(User).where(User.phone == phone))
        return result.scalars().first()

    def _overwrite_challenge(self, phone: str, code: str, expires_at: datetime) -> int:
        result = self.session.execute(
            update(User)
            .where(User.phone == phone)
            .values(otp_code=code, otp_expires_at=expires_at)
        )
        return result.rowcount

    def upsert_challenge(self, phone: str, code: str, expires_at: datetime) -> None:
        """Create the identity if needed and replace its challenge.

        Code and expiry are written by a single statement so a concurrent
        request for the same phone can never leave a torn pair behind; the
        last writer wins.
        """
        if self._overwrite_challenge(phone, code, expires_at) == 0:
            self.session.add(User(phone=phone, otp_code=code, otp_expires_at=expires_at))
            try:
                self.session.flush()
            except IntegrityError:
                # Another request inserted the same phone first.
                self.session.rollback()
                self._overwrite_challenge(phone, code, expires_at)
        self.session.commit()

    def consume_challenge(self, user_id: int, code: str) -> bool:
        """Clear the challenge only if ``code`` is still the active one.

        Returns False when another verifier already consumed it or a newer
        challenge replaced it.
        """
        result = self.session.execute(
            update(User)
            .where(User.id == user_id, User.otp_code == code)
            .values(otp_code=None, otp_expires_at=None)
        )
        if result.rowcount != 1:
            self.session.rollback()
            return False
        self.session.commit()
        return True
