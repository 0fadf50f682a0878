# shopauth/services/sessions/manager.py
from __future__ import annotations

import logging
from datetime import timedelta

from shopauth.models.base import ensure_aware
from shopauth.models.session import UserSession
from shopauth.services._shared.ports import Clock, SystemClock
from shopauth.uow.base import UnitOfWork

log = logging.getLogger(__name__)


class SessionManager:
    """
    Create, extend and revoke server-side sessions.

    A session row is the only source of truth for refresh-token liveness: a
    refresh token whose session is gone or expired is void regardless of its
    signature. Every method works inside the caller's Unit of Work and never
    commits.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        ttl: timedelta = timedelta(days=30),
        refresh_window: timedelta = timedelta(days=1),
    ) -> None:
        """
        :param clock: Source of "now" for expiry math.
        :param ttl: Lifetime granted on creation and on each extension.
        :param refresh_window: Remaining lifetime at or under which a refresh extends the session.
        """
        self.clock = clock or SystemClock()
        self.ttl = ttl
        self.refresh_window = refresh_window

    def create(self, uow: UnitOfWork, user_id: str, user_agent: str | None = None) -> UserSession:
        """Insert a new session expiring ``ttl`` from now."""
        now = self.clock.now()
        session = UserSession(
            user_id=user_id,
            user_agent=user_agent,
            created_at=now,
            expires_at=now + self.ttl,
        )
        return uow.sessions.add(session)

    def get_live(self, uow: UnitOfWork, session_id: str) -> UserSession | None:
        """Return the session when it exists and has not expired."""
        session = uow.sessions.get(session_id)
        if session is None or session.is_expired(self.clock.now()):
            return None
        return session

    def touch(self, uow: UnitOfWork, session: UserSession) -> bool:
        """
        Extend ``session`` when it is inside the refresh window.

        :returns: ``True`` if ``expires_at`` moved (callers then reissue the refresh token).
        """
        now = self.clock.now()
        if ensure_aware(session.expires_at) - now > self.refresh_window:
            return False
        uow.sessions.update(session, expires_at=now + self.ttl)
        return True

    def revoke(self, uow: UnitOfWork, session_id: str) -> bool:
        """Delete one session; ``False`` when it was already gone."""
        return uow.sessions.delete_by_id(session_id)

    def revoke_all(self, uow: UnitOfWork, user_id: str) -> int:
        """Delete every session of ``user_id``."""
        removed = uow.sessions.delete_for_user(user_id)
        log.debug("Revoked %d session(s)", removed, extra={"user_id": user_id})
        return removed

    def prune(self, uow: UnitOfWork) -> int:
        """Delete all expired sessions."""
        return uow.sessions.delete_expired(self.clock.now())
