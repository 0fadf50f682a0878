"""Composition root for :class:`AuthService`."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from shopauth.infra.jwt.pyjwt_token_provider import JWTTokenProvider
from shopauth.infra.mail.logging_mailer import LoggingMailer
from shopauth.services._shared.ports import Clock, Mailer, SystemClock
from shopauth.services.auth.dto import AuthPolicy
from shopauth.services.auth.service import AuthService


def build_auth_service(
    config: Mapping[str, Any],
    *,
    mailer: Mailer | None = None,
    clock: Clock | None = None,
) -> AuthService:
    """
    Wire an :class:`AuthService` from a flat config mapping (``app.config``).

    :param config: Flask-style configuration.
    :param mailer: Outbound mail adapter; defaults to :class:`LoggingMailer`.
    :param clock: Clock shared by the token provider and managers.
    """
    clock = clock or SystemClock()
    return AuthService(
        token_provider=JWTTokenProvider.from_config(config, clock=clock),
        mailer=mailer or LoggingMailer(sender=config.get("MAIL_SENDER", "no-reply@localhost")),
        clock=clock,
        policy=AuthPolicy.from_config(config),
    )
