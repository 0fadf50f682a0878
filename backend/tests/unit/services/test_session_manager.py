"""Unit tests for SessionManager."""

from __future__ import annotations

from datetime import timedelta

import pytest

from shopauth.models.base import ensure_aware
from shopauth.services.sessions import SessionManager
from shopauth.uow import SQLAlchemyUnitOfWork
from tests.factories import REFERENCE_NOW
from tests.factories.session import UserSessionFactory
from tests.factories.user import UserFactory


@pytest.fixture()
def manager(clock) -> SessionManager:
    return SessionManager(clock=clock, ttl=timedelta(days=30), refresh_window=timedelta(days=1))


def test_create_sets_expiry_from_clock(manager, session):
    user = UserFactory()
    with SQLAlchemyUnitOfWork() as uow:
        created = manager.create(uow, user.id, "pytest-agent")
        session_id = created.id

    with SQLAlchemyUnitOfWork() as uow:
        row = uow.sessions.get(session_id)
        assert row.user_id == user.id
        assert row.user_agent == "pytest-agent"
        assert ensure_aware(row.expires_at) == REFERENCE_NOW + timedelta(days=30)


def test_get_live_rejects_missing_and_expired(manager, clock, session):
    live = UserSessionFactory()
    session.commit()

    with SQLAlchemyUnitOfWork() as uow:
        assert manager.get_live(uow, live.id) is not None
        assert manager.get_live(uow, "missing") is None

    clock.set(REFERENCE_NOW + timedelta(days=30))
    with SQLAlchemyUnitOfWork() as uow:
        assert manager.get_live(uow, live.id) is None


def test_touch_outside_window_keeps_expiry(manager, clock, session):
    row = UserSessionFactory()
    clock.advance(days=28)

    with SQLAlchemyUnitOfWork() as uow:
        assert manager.touch(uow, row) is False
    assert ensure_aware(row.expires_at) == REFERENCE_NOW + timedelta(days=30)


def test_touch_inside_window_extends(manager, clock, session):
    row = UserSessionFactory()
    now = clock.advance(days=29)

    with SQLAlchemyUnitOfWork() as uow:
        assert manager.touch(uow, row) is True
    assert ensure_aware(row.expires_at) == now + timedelta(days=30)


def test_revoke_and_revoke_all(manager, session):
    user = UserFactory()
    first = UserSessionFactory(user=user)
    UserSessionFactory(user=user)
    UserSessionFactory(user=user)
    other = UserSessionFactory()
    session.commit()
    first_id = first.id

    with SQLAlchemyUnitOfWork() as uow:
        assert manager.revoke(uow, first_id) is True
        assert manager.revoke(uow, first_id) is False

    with SQLAlchemyUnitOfWork() as uow:
        assert manager.revoke_all(uow, user.id) == 2
        assert uow.sessions.count_for_user(user.id) == 0
        assert manager.get_live(uow, other.id) is not None


def test_prune_deletes_expired(manager, clock, session):
    UserSessionFactory(expires_at=REFERENCE_NOW - timedelta(minutes=1))
    keep = UserSessionFactory()
    session.commit()

    with SQLAlchemyUnitOfWork() as uow:
        assert manager.prune(uow) == 1
        assert uow.sessions.get(keep.id) is not None
