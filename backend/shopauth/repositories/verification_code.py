"""Verification-code repository."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import select

from shopauth.models.verification_code import VerificationCode, VerificationCodeType
from shopauth.repositories.base import BaseRepository


class VerificationCodeRepository(BaseRepository[VerificationCode]):
    """Persistence-only repository for :class:`VerificationCode`.

    Lookups go through ``token_hash``; the raw bearer secret never reaches
    this layer.
    """

    model = VerificationCode

    def _filterable_fields(self):
        return {
            "id": VerificationCode.id,
            "user_id": VerificationCode.user_id,
            "type": VerificationCode.type,
            "token_hash": VerificationCode.token_hash,
        }

    def get_live_by_hash(
        self, token_hash: str, code_type: VerificationCodeType, now: datetime
    ) -> VerificationCode | None:
        """Return the unexpired code matching ``token_hash`` and ``code_type``.

        The row is selected ``FOR UPDATE`` where the backend supports it, so
        concurrent redemptions of one code serialize.

        :param token_hash: SHA-256 hex digest of the bearer secret.
        :param code_type: Expected purpose of the code.
        :param now: Reference instant for expiry.
        :returns: Code or ``None`` when missing, mistyped or expired.
        """
        stmt = select(VerificationCode).where(
            VerificationCode.token_hash == token_hash,
            VerificationCode.type == code_type,
            VerificationCode.expires_at > now,
        ).with_for_update()
        return cast(VerificationCode | None, self.session.execute(stmt).scalars().first())

    def delete_by_id(self, code_id: str) -> bool:
        """Delete one code; ``False`` when no row matched."""
        return self.delete_where(id=code_id) > 0

    def delete_for_user(self, user_id: str, code_type: VerificationCodeType) -> int:
        """Delete all codes of ``code_type`` owned by ``user_id``."""
        return self.delete_where(user_id=user_id, type=code_type)

    def count_created_since(
        self, user_id: str, code_type: VerificationCodeType, since: datetime
    ) -> int:
        """Count codes of ``code_type`` created for ``user_id`` after ``since``."""
        return self.count_where(
            VerificationCode.created_at > since,
            user_id=user_id,
            type=code_type,
        )

    def delete_expired(self, now: datetime) -> int:
        return self.delete_where(VerificationCode.expires_at <= now)
