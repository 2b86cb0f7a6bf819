"""Phone OTP issuance and verification."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from docxcheck.core.security import create_access_token
from docxcheck.core.settings import Settings
from docxcheck.db.time import as_utc, utcnow
from docxcheck.repositories.credentials import CredentialStore
from docxcheck.services.errors import MissingInputError, ServiceError
from docxcheck.services.notifier import Notifier, NotifierError

logger = logging.getLogger(__name__)


class OtpError(ServiceError):
    """Base class for OTP flow failures that map to client errors."""


class IdentityNotFoundError(OtpError):
    """Raised when no identity exists for the phone number."""


class InvalidChallengeError(OtpError):
    """Raised when there is no active challenge or the code does not match."""


class ChallengeExpiredError(OtpError):
    """Raised when the code matches but its window has closed."""


@dataclass(frozen=True)
class ChallengeIssued:
    """Outcome of a challenge request; never carries the code."""

    delivered: bool
    test_mode: bool

    @property
    def message(self) -> str:
        if self.test_mode:
            return "OTP generated successfully (Check server terminal)"
        if not self.delivered:
            return "OTP generated successfully"
        return "OTP sent successfully"


def generate_code(length: int) -> str:
    """Return a uniformly random numeric code of ``length`` digits."""
    lower = 10 ** (length - 1)
    return str(lower + secrets.randbelow(9 * lower))


class OtpAuthenticator:
    """Issues and validates OTP challenges and mints session tokens."""

    def __init__(
        self,
        store: CredentialStore,
        notifier: Notifier,
        settings: Settings,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.clock = clock

    async def request_challenge(self, phone: str | None) -> ChallengeIssued:
        """Issue a fresh challenge for ``phone``, replacing any earlier one.

        Delivery is best effort unless ``otp_strict_delivery`` is enabled:
        a notifier failure is logged and the challenge stays valid.

        Raises:
            MissingInputError: If ``phone`` is blank.
            NotifierError: If delivery failed and strict delivery is on.
        """
        phone = (phone or "").strip()
        if not phone:
            raise MissingInputError("Phone number is required")

        code = generate_code(self.settings.otp_length)
        expires_at = self.clock() + timedelta(minutes=self.settings.otp_expire_minutes)
        self.store.upsert_challenge(phone, code, expires_at)

        message = (
            f"Your DocxCheck verification code is: {code}. "
            f"Valid for {self.settings.otp_expire_minutes} minutes."
        )
        try:
            await self.notifier.send(phone, message)
        except NotifierError:
            if self.settings.otp_strict_delivery:
                raise
            logger.exception("OTP delivery to %s failed; challenge remains issued", phone)
            return ChallengeIssued(delivered=False, test_mode=self.notifier.test_mode)

        return ChallengeIssued(delivered=True, test_mode=self.notifier.test_mode)

    def verify_challenge(self, phone: str | None, code: str | None) -> str:
        """Check ``code`` against the active challenge and return a session token.

        Raises:
            MissingInputError: If either field is blank.
            IdentityNotFoundError: If the phone has never requested a code.
            InvalidChallengeError: If no challenge is active, the code differs,
                or a concurrent verification consumed it first.
            ChallengeExpiredError: If the challenge window has closed.
        """
        phone = (phone or "").strip()
        code = (code or "").strip()
        if not phone or not code:
            raise MissingInputError("Phone number and OTP are required")

        user = self.store.get_by_phone(phone)
        if user is None:
            raise IdentityNotFoundError("User not found")
        if (
            user.otp_code is None
            or user.otp_expires_at is None
            or not secrets.compare_digest(user.otp_code.encode(), code.encode())
        ):
            raise InvalidChallengeError("Invalid OTP")

        now = self.clock()
        if now >= as_utc(user.otp_expires_at):
            raise ChallengeExpiredError("OTP expired")

        user_id, user_phone = user.id, user.phone
        if not self.store.consume_challenge(user_id, code):
            raise InvalidChallengeError("Invalid OTP")

        return create_access_token(user_id, user_phone, now=now)
