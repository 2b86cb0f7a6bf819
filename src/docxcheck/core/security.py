"""Session token helpers built on signed JWTs."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from jose import JWTError, jwt

from docxcheck.core.settings import settings
from docxcheck.db.time import utcnow


class InvalidTokenError(ValueError):
    """Raised when a session token is malformed, forged or expired."""


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """Identity asserted by a verified session token."""

    id: int
    phone: str


def create_access_token(
    user_id: int,
    phone: str,
    *,
    now: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed session token for an identity.

    Args:
        user_id: Primary key of the identity.
        phone: Phone number of the identity.
        now: Issuance time; defaults to the current UTC time.
        expires_delta: Token lifetime; defaults to the configured 7 days.

    Returns:
        Encoded JWT carrying ``sub``, ``phone``, ``iat`` and ``exp`` claims.
    """
    issued_at = int((now or utcnow()).timestamp())
    lifetime = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    to_encode: dict[str, object] = {
        "sub": str(user_id),
        "phone": phone,
        "iat": issued_at,
        "exp": issued_at + int(lifetime.total_seconds()),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str, *, now: datetime | None = None) -> AuthenticatedIdentity:
    """Verify a session token and return the identity it asserts.

    Verification needs only the shared secret. The token is rejected at or
    after its ``exp`` instant.

    Raises:
        InvalidTokenError: If the signature, claims or expiry are invalid.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": False, "require_exp": True, "require_sub": True},
        )
    except JWTError as err:
        raise InvalidTokenError("Could not validate credentials") from err

    expires_at = payload.get("exp")
    subject = payload.get("sub")
    phone = payload.get("phone")
    if not isinstance(expires_at, (int, float)) or not isinstance(phone, str):
        raise InvalidTokenError("Token is missing required claims")

    current = (now or utcnow()).timestamp()
    if current >= expires_at:
        raise InvalidTokenError("Token has expired")

    try:
        user_id = int(subject)
    except (TypeError, ValueError) as err:
        raise InvalidTokenError("Token subject is not a valid identity") from err

    return AuthenticatedIdentity(id=user_id, phone=phone)
