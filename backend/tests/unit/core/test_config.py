"""Configuration selection and application factory wiring."""

from __future__ import annotations

import pytest

from shopauth.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
)
from shopauth.factory import create_app
from shopauth.infra.jwt.pyjwt_token_provider import JWTTokenProvider
from shopauth.infra.mail.logging_mailer import LoggingMailer
from shopauth.services.auth import AuthPolicy
from shopauth.services.auth.wiring import build_auth_service


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("development", DevelopmentConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_by_env(monkeypatch, name, expected):
    monkeypatch.setenv("APP_ENV", name)
    assert get_config() is expected


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    monkeypatch.setenv("NUMBER", "42")
    assert env_bool("FLAG") is True
    assert env_bool("MISSING_FLAG", default=True) is True
    assert env_int("NUMBER", 1) == 42
    assert env_int("MISSING_NUMBER", 7) == 7


def test_create_app_rejects_shared_jwt_secret():
    class SharedSecret(TestingConfig):
        JWT_REFRESH_SECRET = TestingConfig.JWT_ACCESS_SECRET

    with pytest.raises(RuntimeError, match="must differ"):
        create_app(SharedSecret)


def test_policy_from_config(app):
    policy = AuthPolicy.from_config({**app.config, "APP_ORIGIN": "https://x.example/"})
    assert policy.app_origin == "https://x.example"
    assert policy.password_reset_limit == 3
    assert policy.session_refresh_window.total_seconds() == 24 * 3600


def test_build_auth_service_defaults(app):
    service = build_auth_service(app.config)
    assert isinstance(service.tokens, JWTTokenProvider)
    assert isinstance(service.mailer, LoggingMailer)
    assert service.sessions.clock is service.clock
