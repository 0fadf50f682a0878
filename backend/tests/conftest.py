"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. Service-level
fixtures share one :class:`FrozenClock` so expiry behaviour is deterministic.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy.orm import scoped_session, sessionmaker

from shopauth.core.config import TestingConfig
from shopauth.core.extensions import db as _db  # Flask-SQLAlchemy instance
from shopauth.factory import create_app  # application factory under test
from shopauth.infra.jwt.pyjwt_token_provider import JWTTokenProvider
from shopauth.services._shared.ports import FrozenClock, InMemoryMailer
from shopauth.services.auth import AuthPolicy, AuthService


class TestConfig(TestingConfig):
    """Testing configuration for creating the Flask app.

    Notes
    -----
    - Uses an in-memory SQLite database for speed.
    - Uses a cheap password hash and fixed, distinct JWT secrets.
    - Avoids hitting external services.
    """

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    APP_ORIGIN = "https://shop.example.com"
    LOG_LEVEL = "INFO"


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with :class:`TestConfig` applied.
    """
    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    return create_app(TestConfig)


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Parameters
    ----------
    app: flask.Flask
        Application fixture ensuring the Flask context is available.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session.

    Yields
    ------
    sqlalchemy.engine.Connection
        Connection reused by nested transactions in each test.
    """
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Yields
    ------
    sqlalchemy.orm.scoping.scoped_session
        Scoped session bound to the shared connection; automatically rolled
        back after each test.

    Notes
    -----
    The session joins the connection in ``create_savepoint`` mode, so
    ``commit()`` and ``rollback()`` issued by Units of Work only release or
    roll back their own SAVEPOINT. The outer transaction is rolled back at
    teardown.
    """
    # 1) Top-level transaction plus an outer SAVEPOINT
    top_trans = connection.begin()
    connection.begin_nested()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(
        bind=connection,
        join_transaction_mode="create_savepoint",
        future=True,
    )
    scoped = scoped_session(SessionFactory)

    # 3) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Service collaborators -------------------------------------------------------
@pytest.fixture()
def clock() -> FrozenClock:
    """Clock frozen at :data:`tests.factories.REFERENCE_NOW`."""
    from tests.factories import REFERENCE_NOW

    return FrozenClock(REFERENCE_NOW)


@pytest.fixture()
def mailer() -> InMemoryMailer:
    return InMemoryMailer()


@pytest.fixture()
def token_provider(app, clock) -> JWTTokenProvider:
    """PyJWT adapter built from the testing config and the frozen clock."""
    return JWTTokenProvider.from_config(app.config, clock=clock)


@pytest.fixture()
def auth_service(app, token_provider, mailer, clock) -> AuthService:
    """AuthService wired to the real JWT adapter and in-memory mailer."""
    return AuthService(
        token_provider=token_provider,
        mailer=mailer,
        clock=clock,
        policy=AuthPolicy.from_config(app.config),
    )


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time` for wall-clock code paths.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2025-03-01"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2025-03-01")

    return _factory
