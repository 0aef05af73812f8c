"""Tests for the User (token subject) model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from stateless_oauth.models.user import User, normalize_email


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("Ann@Example.COM", "ann@example.com"), ("  bo@x.io\t", "bo@x.io")],
)
def test_normalize_email(raw, expected):
    assert normalize_email(raw) == expected


class TestUser:
    def test_stored_email_is_normalized(self, session):
        subject = User(email="  Alice@Example.com ")
        session.add(subject)
        session.commit()

        assert subject.email == "alice@example.com"
        assert subject.created_at is not None

    def test_duplicate_email_differing_only_in_case_is_rejected(self, session):
        session.add(User(email="alice@example.com"))
        session.commit()

        session.add(User(email="ALICE@example.com"))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    @pytest.mark.parametrize("email", ["", "   ", None, "no-at-sign", "user@localhost", "@example.com"])
    def test_invalid_email_is_rejected(self, email):
        with pytest.raises(ValueError):
            User(email=email)

    def test_repr_shows_id_and_email(self, session):
        subject = User(email="carol@example.com")
        session.add(subject)
        session.flush()

        assert repr(subject) == f"<User id={subject.id} email='carol@example.com'>"
