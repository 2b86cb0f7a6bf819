# tests/conftest.py
from __future__ import annotations

import os
import re
from collections.abc import Generator, Iterator
from datetime import datetime
from typing import Any

import pytest

os.environ.setdefault("JWT_SECRET", "test-secret-key-for-docxcheck")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from docxcheck.api.dependencies import get_model_client, get_notifier
from docxcheck.core.security import AuthenticatedIdentity, create_access_token
from docxcheck.db.session import Base, enable_sqlite_foreign_keys
from docxcheck.db.session import get_db as app_get_session
from docxcheck.main import app as fastapi_app
from docxcheck.models import User
from docxcheck.services.model_client import GenerationOptions, ModelCallError, ModelClient
from docxcheck.services.normalizer import ContentUnit
from docxcheck.services.notifier import Notifier, NotifierError

TEST_DB_URL = "sqlite://"
_CODE_RE = re.compile(r"\b(\d{6})\b")


class FakeModelClient(ModelClient):
    """Replays scripted replies and records every call it receives."""

    def __init__(self) -> None:
        self.replies: list[str | Exception] = []
        self.calls: list[tuple[list[ContentUnit], GenerationOptions]] = []

    def queue(self, *replies: str | Exception) -> None:
        self.replies.extend(replies)

    async def generate(self, units: list[ContentUnit], options: GenerationOptions) -> str:
        self.calls.append((units, options))
        if not self.replies:
            raise ModelCallError("no scripted reply")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class RecordingNotifier(Notifier):
    """Keeps delivered messages in memory; can be told to fail."""

    def __init__(self, *, fail: bool = False, test_mode: bool = False) -> None:
        self.fail = fail
        self.test_mode = test_mode
        self.sent: list[tuple[str, str]] = []

    async def send(self, phone: str, message: str) -> None:
        if self.fail:
            raise NotifierError("provider unavailable")
        self.sent.append((phone, message))

    def last_code(self, phone: str) -> str:
        for to, message in reversed(self.sent):
            if to == phone:
                match = _CODE_RE.search(message)
                assert match is not None, message
                return match.group(1)
        raise AssertionError(f"no message sent to {phone}")


class FixedClock:
    """Mutable clock for time-dependent OTP tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def fake_model() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def app(
    session_factory: sessionmaker[Session],
    fake_model: FakeModelClient,
    notifier: RecordingNotifier,
) -> Iterator[FastAPI]:
    def _get_session_override() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[app_get_session] = _get_session_override
    fastapi_app.dependency_overrides[get_model_client] = lambda: fake_model
    fastapi_app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield fastapi_app
    finally:
        fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Create and return a persisted identity."""
    user = User(phone="+15550001111")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Create and return a second persisted identity."""
    user = User(phone="+15550002222")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture()
def identity(test_user: User) -> AuthenticatedIdentity:
    return AuthenticatedIdentity(id=test_user.id, phone=test_user.phone)


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    token = create_access_token(test_user.id, test_user.phone)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_headers(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    token = create_access_token(other_user.id, other_user.phone)
    return {"Authorization": f"Bearer {token}"}


def similarity_payload(score: Any = 85, **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "similarity_score": score,
        "matched_words": 120,
        "total_words": 300,
        "common_phrases": ["terms and conditions", "hereinafter referred to"],
        "exact_match_pct": 40,
        "paraphrase_pct": 35,
        "structural_pct": 10,
        "ref_lang": "en",
        "tgt_lang": "fr",
    }
    payload.update(overrides)
    return payload
