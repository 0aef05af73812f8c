"""Tests for the Application (OAuth client) model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from stateless_oauth.models.application import Application


class TestApplication:
    def test_secret_hashing(self, session):
        a = Application(name="Mobile app")
        a.secret = "s3cret"
        session.add(a)
        session.commit()

        assert a.secret_hash != "s3cret"
        assert a.verify_secret("s3cret") is True
        assert a.verify_secret("wrong") is False
        assert a.verify_secret(None) is False

    def test_secret_is_write_only(self):
        a = Application(name="Mobile app")
        a.secret = "x"
        with pytest.raises(AttributeError):
            _ = a.secret

    def test_empty_secret_is_rejected(self):
        a = Application(name="Mobile app")
        with pytest.raises(ValueError):
            a.secret = ""

    def test_uid_is_generated_and_unique(self, session):
        a = Application(name="one")
        a.secret = "x"
        session.add(a)
        session.commit()
        assert a.uid and len(a.uid) >= 32

        b = Application(name="two", uid=a.uid)
        b.secret = "y"
        session.add(b)
        with pytest.raises(IntegrityError):
            session.commit()

    def test_scopes_are_normalized(self):
        a = Application(name="x", scopes="  read   write read ")
        assert a.scopes == "read write"
        assert Application(name="y", scopes=None).scopes == ""

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_name_is_required(self, name):
        with pytest.raises(ValueError):
            Application(name=name)

    def test_name_is_trimmed(self):
        assert Application(name="  CLI  ").name == "CLI"

    def test_repr_never_shows_the_secret(self):
        a = Application(name="CLI", uid="abc")
        a.secret = "s3cret"
        text = repr(a)
        assert "uid='abc'" in text
        assert "s3cret" not in text and a.secret_hash not in text
