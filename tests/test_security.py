"""Tests for session token signing and verification."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from docxcheck.core.security import (
    AuthenticatedIdentity,
    InvalidTokenError,
    create_access_token,
    decode_access_token,
)
from docxcheck.core.settings import settings

ISSUED = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)
SEVEN_DAYS = timedelta(days=7)


def test_token_round_trip_carries_identity():
    token = create_access_token(42, "+15550001111", now=ISSUED)
    identity = decode_access_token(token, now=ISSUED)
    assert identity == AuthenticatedIdentity(id=42, phone="+15550001111")


def test_token_expiry_is_seven_days():
    token = create_access_token(1, "+1", now=ISSUED)
    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == int(SEVEN_DAYS.total_seconds())
    assert claims["sub"] == "1"
    assert claims["phone"] == "+1"


def test_token_accepted_until_expiry():
    token = create_access_token(1, "+1", now=ISSUED)
    last_valid = ISSUED + SEVEN_DAYS - timedelta(seconds=1)
    assert decode_access_token(token, now=last_valid).id == 1


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(seconds=1), timedelta(days=1)])
def test_token_rejected_at_or_after_expiry(offset):
    token = create_access_token(1, "+1", now=ISSUED)
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, now=ISSUED + SEVEN_DAYS + offset)


def test_token_signed_with_other_secret_rejected():
    forged = jwt.encode(
        {"sub": "1", "phone": "+1", "exp": int((ISSUED + SEVEN_DAYS).timestamp())},
        "wrong_secret_key",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(forged, now=ISSUED)


def test_token_without_phone_rejected():
    token = jwt.encode(
        {"sub": "1", "exp": int((ISSUED + SEVEN_DAYS).timestamp())},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, now=ISSUED)


def test_token_with_non_numeric_subject_rejected():
    token = jwt.encode(
        {"sub": "abc", "phone": "+1", "exp": int((ISSUED + SEVEN_DAYS).timestamp())},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(InvalidTokenError):
        decode_access_token(token, now=ISSUED)


def test_garbage_token_rejected():
    with pytest.raises(InvalidTokenError):
        decode_access_token("not.a.valid.jwt")
