"""Unit tests for SessionRepository."""

from datetime import timedelta

import pytest

from shopauth.repositories.session import SessionRepository
from tests.factories import REFERENCE_NOW
from tests.factories.session import UserSessionFactory
from tests.factories.user import UserFactory


class TestSessionRepository:
    @pytest.fixture()
    def repo(self):
        return SessionRepository()

    def test_delete_for_user_only_touches_owner(self, repo, session):
        owner = UserFactory()
        other = UserFactory()
        UserSessionFactory(user=owner)
        UserSessionFactory(user=owner)
        kept = UserSessionFactory(user=other)
        session.commit()

        assert repo.delete_for_user(owner.id) == 2
        assert repo.count_for_user(owner.id) == 0
        assert repo.get(kept.id) is not None

    def test_delete_for_user_without_sessions(self, repo, session):
        user = UserFactory()
        assert repo.delete_for_user(user.id) == 0

    def test_delete_expired(self, repo, session):
        expired = UserSessionFactory(expires_at=REFERENCE_NOW - timedelta(seconds=1))
        boundary = UserSessionFactory(expires_at=REFERENCE_NOW)
        live = UserSessionFactory(expires_at=REFERENCE_NOW + timedelta(seconds=1))
        session.commit()
        expired_id, boundary_id, live_id = expired.id, boundary.id, live.id

        assert repo.delete_expired(REFERENCE_NOW) == 2
        assert repo.get(expired_id) is None
        assert repo.get(boundary_id) is None
        assert repo.get(live_id) is not None

    def test_update_expiry(self, repo, session):
        s = UserSessionFactory()
        new_expiry = REFERENCE_NOW + timedelta(days=60)
        repo.update(s, expires_at=new_expiry)
        assert s.expires_at == new_expiry
        with pytest.raises(ValueError):
            repo.update(s, user_id="someone-else")

    def test_delete_by_id_removes_only_that_session(self, repo, session):
        target = UserSessionFactory()
        others = [UserSessionFactory(), UserSessionFactory(user=target.user)]
        session.commit()
        target_id = target.id
        other_ids = [s.id for s in others]

        assert repo.delete_by_id(target_id) is True
        assert repo.get(target_id) is None
        assert all(repo.get(sid) is not None for sid in other_ids)
        assert repo.delete_by_id(target_id) is False

    def test_bulk_delete_rejects_unknown_filter(self, repo, session):
        UserSessionFactory()
        session.commit()

        with pytest.raises(ValueError):
            repo.delete_where(user_agent="curl/8.0")
        with pytest.raises(ValueError):
            repo.count_where(token="x")
        assert repo.count_where() == 1
