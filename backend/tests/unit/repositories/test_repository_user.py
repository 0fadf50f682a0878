"""Unit tests for UserRepository."""

import pytest

from shopauth.models.user import Role
from shopauth.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_create_and_get_user(self, repo, session):
        """Create a user and fetch it by email to verify retrieval."""
        u = UserFactory(email="alice@example.com", name="Alice")
        session.commit()

        fetched = repo.get_by_email("  ALICE@example.com ")
        assert fetched is not None
        assert fetched.id == u.id
        assert fetched.name == "Alice"

    def test_exists_by_email(self, repo, session):
        """Return existence flags for known and unknown email addresses."""
        UserFactory(email="bob@example.com")
        session.commit()

        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")

    def test_update_password(self, repo, session):
        """Update a user's password hash and verify authentication works."""
        u = UserFactory(email="c@example.com")
        session.commit()

        old_hash = u.password_hash
        repo.update_password(u, "newpass123")
        session.commit()

        refreshed = repo.get(u.id)
        assert refreshed.password_hash != old_hash
        assert refreshed.verify_password("newpass123")

    def test_update_respects_whitelist(self, repo, session):
        u = UserFactory()
        repo.update(u, name="Renamed", verified=True)
        assert u.name == "Renamed"
        assert u.verified is True

        with pytest.raises(ValueError, match="non-updatable"):
            repo.update(u, role=Role.ADMIN)
        with pytest.raises(ValueError, match="non-updatable"):
            repo.update(u, password_hash="x")

    def test_find_one_and_exists_by_whitelisted_fields(self, repo, session):
        u = UserFactory(role=Role.SELLER)
        session.flush()
        assert repo.find_one(role=Role.SELLER).id == u.id
        assert repo.exists(email=u.email)
