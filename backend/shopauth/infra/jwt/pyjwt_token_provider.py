# shopauth/infra/jwt/pyjwt_token_provider.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

import jwt

from shopauth.services._shared.ports import (
    Clock,
    SystemClock,
    TokenError,
    TokenKind,
    TokenProvider,
    TokenVerification,
)

log = logging.getLogger(__name__)

# Claims the adapter owns; caller-supplied values for these are overwritten.
RESERVED_CLAIMS = ("aud", "iat", "exp", "typ")


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    PyJWT adapter signing each token kind with its own secret and lifetime.

    Expiry is evaluated against the injected :class:`Clock` rather than the
    wall clock, so ``verify`` is deterministic under a frozen clock.

    :param access_secret: HMAC secret for access tokens.
    :param refresh_secret: HMAC secret for refresh tokens (must differ).
    :param access_ttl: Lifetime of access tokens.
    :param refresh_ttl: Lifetime of refresh tokens.
    :param audience: ``aud`` claim embedded in and required from every token.
    :param algorithm: JWS algorithm, HS256 by default.
    :param clock: Source of "now" for ``iat``/``exp``.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=30)
    audience: str = "user"
    algorithm: str = "HS256"
    clock: Clock = field(default_factory=SystemClock)

    def __post_init__(self) -> None:
        if self.access_secret == self.refresh_secret:
            raise ValueError("Access and refresh tokens must use distinct secrets.")

    @classmethod
    def from_config(cls, config: Mapping[str, Any], *, clock: Clock | None = None) -> JWTTokenProvider:
        """Build the adapter from a flat Flask-style config mapping."""
        return cls(
            access_secret=config["JWT_ACCESS_SECRET"],
            refresh_secret=config["JWT_REFRESH_SECRET"],
            access_ttl=timedelta(minutes=int(config.get("ACCESS_TOKEN_TTL_MINUTES", 15))),
            refresh_ttl=timedelta(days=int(config.get("REFRESH_TOKEN_TTL_DAYS", 30))),
            audience=config.get("JWT_AUDIENCE", "user"),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            clock=clock or SystemClock(),
        )

    def _secret_and_ttl(self, kind: TokenKind) -> tuple[str, timedelta]:
        if kind is TokenKind.ACCESS:
            return self.access_secret, self.access_ttl
        return self.refresh_secret, self.refresh_ttl

    def sign(self, claims: Mapping[str, Any], kind: TokenKind) -> str:
        secret, ttl = self._secret_and_ttl(kind)
        now = self.clock.now()
        payload = {k: v for k, v in claims.items() if k not in RESERVED_CLAIMS}
        payload.update(
            {
                "aud": self.audience,
                "iat": int(now.timestamp()),
                "exp": int((now + ttl).timestamp()),
                "typ": kind.value,
            }
        )
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str, kind: TokenKind) -> TokenVerification:
        secret, _ = self._secret_and_ttl(kind)
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                # exp is checked below against the injected clock
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "require": ["aud", "exp", "iat"],
                },
            )
        except jwt.InvalidTokenError as exc:
            log.debug("Rejected %s token: %s", kind.value, exc.__class__.__name__)
            return TokenVerification.failure(TokenError.INVALID)

        if payload.get("typ") != kind.value:
            return TokenVerification.failure(TokenError.INVALID)

        try:
            exp = int(payload["exp"])
        except (TypeError, ValueError):
            return TokenVerification.failure(TokenError.INVALID)
        if exp <= int(self.clock.now().timestamp()):
            return TokenVerification.failure(TokenError.EXPIRED)

        return TokenVerification.success(payload)
