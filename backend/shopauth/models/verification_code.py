"""One-time codes for email verification and password reset."""

from __future__ import annotations

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopauth.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin, ensure_aware

if TYPE_CHECKING:
    from .user import User


class VerificationCodeType(str, enum.Enum):
    """Purpose a code was issued for; a code only redeems for its own type."""

    EMAIL_VERIFICATION = "EmailVerification"
    PASSWORD_RESET = "PasswordReset"


class VerificationCode(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    Single-use, time-bounded code.

    Only the SHA-256 digest of the bearer secret is stored (``token_hash``);
    the secret itself leaves the process once, inside the emailed link.
    """

    __tablename__ = "verification_codes"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[VerificationCodeType] = mapped_column(
        Enum(VerificationCodeType, name="verification_code_type", native_enum=False, length=32),
        nullable=False,
    )
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="verification_codes")

    __table_args__ = (
        UniqueConstraint("token_hash", name="uq_verification_codes_token_hash"),
        Index("ix_verification_codes_user_id_type", "user_id", "type"),
    )

    def is_expired(self, now: datetime) -> bool:
        return ensure_aware(self.expires_at) <= now
