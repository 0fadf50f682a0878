from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


class TokenKind(str, enum.Enum):
    """Token families; each kind is signed with its own secret and ttl."""

    ACCESS = "access"
    REFRESH = "refresh"


class TokenError(enum.Enum):
    """Reason a token failed verification."""

    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class TokenVerification:
    """
    Outcome of :meth:`TokenProvider.verify`.

    Exactly one of ``payload`` and ``error`` is set.

    :param payload: Decoded claims on success.
    :param error: Failure reason otherwise.
    """

    payload: Mapping[str, Any] | None = None
    error: TokenError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None

    @classmethod
    def success(cls, payload: Mapping[str, Any]) -> TokenVerification:
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: TokenError) -> TokenVerification:
        return cls(error=error)


class TokenProvider(Protocol):
    """Port for signing and verifying access/refresh tokens.

    ``verify`` never raises for bad input; callers map the returned
    :class:`TokenError` to their own failure.
    """

    def sign(self, claims: Mapping[str, Any], kind: TokenKind) -> str: ...

    def verify(self, token: str, kind: TokenKind) -> TokenVerification: ...
