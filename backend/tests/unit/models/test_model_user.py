"""Tests for the User model."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from shopauth.models.user import Role, User


class TestUser:
    def test_password_hashing(self, session):
        u = User(name="Tester", email="Test@Example.com")
        u.password = "secret123"
        session.add(u)
        session.commit()
        assert u.password_hash != "secret123"
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = User(name="U1", email="a@example.com")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        u = User(name="U1", email="a@example.com")
        with pytest.raises(ValueError):
            u.password = ""

    def test_oauth_account_has_no_password(self, session):
        u = User(name="Oauth", email="oauth@example.com", verified=True)
        session.add(u)
        session.flush()
        assert u.has_password is False
        assert u.verify_password("anything") is False

    def test_defaults(self, session):
        u = User(name="Dee", email="dee@example.com")
        u.password = "secret123"
        session.add(u)
        session.flush()
        assert u.role is Role.USER
        assert u.verified is False
        assert len(u.id) == 36

    def test_email_normalized_and_unique(self, session):
        u1 = User(name="Alice", email="  Alice@Example.com ")
        u1.password = "pw"
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        u2 = User(name="Alice 2", email="alice@example.com")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()

    def test_invalid_email_rejected(self):
        with pytest.raises(ValueError):
            User(name="Bad", email="not-an-email")

    def test_name_trimmed_and_required(self):
        u = User(name="  Bob  ", email="bob@example.com")
        assert u.name == "Bob"
        with pytest.raises(ValueError, match="Name cannot be empty"):
            u.name = "   "
