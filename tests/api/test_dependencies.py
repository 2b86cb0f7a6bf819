# tests/api/test_dependencies.py
"""Tests for the bearer-token dependency."""

from datetime import timedelta

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from docxcheck.api.dependencies import get_current_identity
from docxcheck.core.security import create_access_token
from docxcheck.db.time import utcnow


class TestGetCurrentIdentity:
    """Test the get_current_identity dependency function."""

    def test_valid_token(self):
        token = create_access_token(7, "+15550007777")
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        identity = get_current_identity(credentials)

        assert identity.id == 7
        assert identity.phone == "+15550007777"

    def test_missing_credentials(self):
        with pytest.raises(HTTPException) as exc_info:
            get_current_identity(None)
        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_expired_token(self):
        token = create_access_token(7, "+1", now=utcnow() - timedelta(days=8))
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        with pytest.raises(HTTPException) as exc_info:
            get_current_identity(credentials)
        assert exc_info.value.status_code == status.HTTP_400_BAD_REQUEST
        assert exc_info.value.detail == "Invalid token."


def test_non_bearer_scheme_is_missing_credential(client):
    response = client.get("/api/history", headers={"Authorization": "Basic abc"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_empty_bearer_is_missing_credential(client):
    response = client.get("/api/history", headers={"Authorization": "Bearer "})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_token_does_not_need_a_store_lookup(client):
    """Verification is stateless: a well-signed token for an unknown id is accepted."""
    token = create_access_token(9999, "+19999999999")
    response = client.get("/api/history", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []
