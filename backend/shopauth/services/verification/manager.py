# shopauth/services/verification/manager.py
from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

from shopauth.models.base import ensure_aware
from shopauth.models.verification_code import VerificationCode, VerificationCodeType
from shopauth.services._shared.ports import Clock, SystemClock
from shopauth.uow.base import UnitOfWork

# Upper bound accepted for a presented secret; longer input is rejected unhashed.
MAX_TOKEN_LENGTH = 128


def hash_token(token: str) -> str:
    """Return the hex SHA-256 digest stored in place of a bearer secret."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class IssuedCode:
    """
    A freshly issued code.

    :ivar id: Row identifier (not a secret).
    :ivar token: High-entropy bearer secret, only ever sent by email.
    :ivar user_id: Owner.
    :ivar type: Purpose of the code.
    :ivar expires_at: Absolute expiry (UTC).
    """

    id: str
    token: str
    user_id: str
    type: VerificationCodeType
    expires_at: datetime


class VerificationCodeManager:
    """
    Issue, redeem and rate-limit one-time verification codes.

    Each code carries a random secret (``secrets.token_urlsafe``); only its
    SHA-256 digest is persisted and comparisons run in constant time. Like
    :class:`~shopauth.services.sessions.SessionManager`, every method operates
    inside the caller's Unit of Work so redemption and its dependent mutation
    commit together.
    """

    def __init__(self, *, clock: Clock | None = None, secret_bytes: int = 32) -> None:
        self.clock = clock or SystemClock()
        self.secret_bytes = secret_bytes

    def issue(
        self,
        uow: UnitOfWork,
        user_id: str,
        code_type: VerificationCodeType,
        ttl: timedelta,
        *,
        replace_existing: bool | None = None,
    ) -> IssuedCode:
        """
        Create a code expiring ``ttl`` from now.

        :param replace_existing: Delete the user's prior codes of this type first.
            Defaults to ``True`` for email verification and ``False`` for password
            reset, where outstanding codes are bounded by the rate limit instead.
        """
        if replace_existing is None:
            replace_existing = code_type is VerificationCodeType.EMAIL_VERIFICATION
        if replace_existing:
            uow.verification_codes.delete_for_user(user_id, code_type)

        now = self.clock.now()
        token = secrets.token_urlsafe(self.secret_bytes)
        code = uow.verification_codes.add(
            VerificationCode(
                user_id=user_id,
                type=code_type,
                token_hash=hash_token(token),
                created_at=now,
                expires_at=now + ttl,
            )
        )
        return IssuedCode(
            id=code.id,
            token=token,
            user_id=user_id,
            type=code_type,
            expires_at=ensure_aware(code.expires_at),
        )

    def redeem(
        self, uow: UnitOfWork, token: str, code_type: VerificationCodeType
    ) -> VerificationCode | None:
        """
        Look up the live code for ``token``.

        Does not delete it: the caller passes the result to :meth:`consume`
        in the same Unit of Work as the mutation the code authorizes.

        :returns: The code, or ``None`` when unknown, of another type, or expired.
        """
        if not isinstance(token, str) or not token or len(token) > MAX_TOKEN_LENGTH:
            return None
        digest = hash_token(token)
        code = uow.verification_codes.get_live_by_hash(digest, code_type, self.clock.now())
        if code is None or not hmac.compare_digest(code.token_hash, digest):
            return None
        return code

    def consume(self, uow: UnitOfWork, code: VerificationCode) -> bool:
        """Delete a redeemed code; ``False`` when another redemption already removed it."""
        return uow.verification_codes.delete_by_id(code.id)

    def count_recent(
        self,
        uow: UnitOfWork,
        user_id: str,
        code_type: VerificationCodeType,
        window: timedelta,
    ) -> int:
        """Count codes of ``code_type`` issued to ``user_id`` within the trailing ``window``."""
        since = self.clock.now() - window
        return uow.verification_codes.count_created_since(user_id, code_type, since)

    def prune(self, uow: UnitOfWork) -> int:
        """Delete all expired codes."""
        return uow.verification_codes.delete_expired(self.clock.now())
