"""
shopauth.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) the auth services depend on.

Modules
-------
- :mod:`token_provider`:
    Defines :class:`~.TokenProvider`, :class:`~.TokenKind` and the
    non-throwing :class:`~.TokenVerification` result.

- :mod:`mailer`:
    Defines :class:`~.Mailer` and :class:`~.MailResult`, plus the
    :class:`~.InMemoryMailer` test double.

- :mod:`clock`:
    Defines :class:`~.Clock` with :class:`~.SystemClock` and the
    :class:`~.FrozenClock` used for deterministic expiry tests.

Design Notes
------------
Concrete adapters (PyJWT, logging mailer) live under ``shopauth.infra``.
"""

from __future__ import annotations

from .clock import Clock, FrozenClock, SystemClock
from .mailer import InMemoryMailer, Mailer, MailResult, OutgoingMail
from .token_provider import TokenError, TokenKind, TokenProvider, TokenVerification

__all__ = [
    "Clock",
    "FrozenClock",
    "SystemClock",
    "InMemoryMailer",
    "MailResult",
    "Mailer",
    "OutgoingMail",
    "TokenError",
    "TokenKind",
    "TokenProvider",
    "TokenVerification",
]
