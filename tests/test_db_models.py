"""Unit tests for the ORM models.

These tests verify basic mapping correctness: table names, the phone
uniqueness constraint, and the history foreign key.
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import attributes

from docxcheck.models import AnalysisKind, HistoryEntry, User


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert User.__tablename__ == "users"
    assert HistoryEntry.__tablename__ == "history"


def test_history_references_users():
    """History rows point at users.id."""
    fks = {fk.target_fullname for fk in HistoryEntry.__table__.foreign_keys}
    assert fks == {"users.id"}


def test_relationships_are_instrumented_attributes():
    for a in (User.history, HistoryEntry.owner):
        assert isinstance(a, attributes.InstrumentedAttribute)


def test_analysis_kind_labels():
    assert AnalysisKind.SIMILARITY_CHECK.value == "Similarity Check"
    assert AnalysisKind.WEB_SCAN.value == "Web Scan"
    assert AnalysisKind.SUMMARY.value == "AI Summary"


def test_phone_is_unique(db_session, test_user):
    db_session.add(User(phone=test_user.phone))
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_history_requires_existing_user(db_session):
    """Foreign keys are enforced on SQLite connections."""
    db_session.add(
        HistoryEntry(
            user_id=999,
            type=AnalysisKind.SUMMARY.value,
            docs="Document",
            score="-",
            details="Summarized",
            verdict="Done",
        )
    )
    with pytest.raises(IntegrityError):
        db_session.commit()
    db_session.rollback()


def test_new_user_has_no_active_challenge(test_user):
    assert test_user.has_active_challenge is False
