"""Server-side session anchoring refresh-token liveness."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopauth.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin, ensure_aware

if TYPE_CHECKING:
    from .user import User


class UserSession(PKMixin, ReprMixin, CreatedAtMixin, db.Model):
    """
    One logical login of a user on a device.

    Fields
    ------
    user_id : str
        Owning user (cascade-deleted with it).
    user_agent : str | None
        Client user agent captured at sign-in.
    expires_at : datetime
        Hard expiry; a refresh token referencing an expired row is void.
    """

    __tablename__ = "sessions"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="sessions")

    __table_args__ = (
        Index("ix_sessions_user_id", "user_id"),
        Index("ix_sessions_expires_at", "expires_at"),
    )

    def is_expired(self, now: datetime) -> bool:
        """Return ``True`` once ``now`` reached ``expires_at``."""
        return ensure_aware(self.expires_at) <= now
