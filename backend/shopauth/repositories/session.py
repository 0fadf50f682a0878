"""Session repository: persistence for refresh-token anchors."""

from __future__ import annotations

from datetime import datetime

from shopauth.models.session import UserSession
from shopauth.repositories.base import BaseRepository


class SessionRepository(BaseRepository[UserSession]):
    """Persistence-only repository for :class:`UserSession`."""

    model = UserSession

    def _filterable_fields(self):
        return {"id": UserSession.id, "user_id": UserSession.user_id}

    def _updatable_fields(self):
        return {"expires_at"}

    def delete_by_id(self, session_id: str) -> bool:
        """Delete one session; ``False`` when no row matched."""
        return self.delete_where(id=session_id) > 0

    def delete_for_user(self, user_id: str) -> int:
        """Delete every session owned by ``user_id``; return the row count."""
        return self.delete_where(user_id=user_id)

    def delete_expired(self, now: datetime) -> int:
        """Delete sessions whose ``expires_at`` is not after ``now``."""
        return self.delete_where(UserSession.expires_at <= now)

    def count_for_user(self, user_id: str) -> int:
        return self.count_where(user_id=user_id)
