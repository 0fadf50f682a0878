# shopauth/services/auth/dto.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from shopauth.models.user import Role, User

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for password sign-up.

    :param name: Display name.
    :type name: str
    :param email: Email address (normalized by the model).
    :type email: str
    :param password: Raw password (hashed by the model setter).
    :type password: str
    :param user_agent: Client user agent stored on the session.
    :type user_agent: str | None
    """

    name: str
    email: str
    password: str
    user_agent: str | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    :param user_agent: Client user agent stored on the session.
    :type user_agent: str | None
    """

    email: str
    password: str
    user_agent: str | None = None


@dataclass(frozen=True, slots=True)
class OAuthProfileIn:
    """
    Input DTO for an OAuth provider callback.

    :param email: Email reported by the provider; required.
    :type email: str | None
    :param name: Display name reported by the provider.
    :type name: str | None
    :param photo: Avatar URL reported by the provider.
    :type photo: str | None
    :param provider: Provider label (e.g. ``"google"``), used for logging only.
    :type provider: str
    """

    email: str | None
    name: str | None = None
    photo: str | None = None
    provider: str = "oauth"
    user_agent: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """
    Input DTO for logout.

    :param access_token: Encoded access JWT; ``None`` when the client sent none.
    :type access_token: str | None
    """

    access_token: str | None = None


@dataclass(frozen=True, slots=True)
class ChangeNameIn:
    user_id: str
    name: str


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    """
    Input DTO for a password change by an authenticated user.

    :param user_id: Authenticated user id.
    :type user_id: str
    :param current_password: Password currently on file.
    :type current_password: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    user_id: str
    current_password: str
    new_password: str


@dataclass(frozen=True, slots=True)
class ResetPasswordIn:
    """
    Input DTO for redeeming a password-reset code.

    :param password: New password.
    :type password: str
    :param code: Bearer secret from the reset link.
    :type code: str
    """

    password: str
    code: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserOut:
    """
    Output DTO representing public-safe user data (never the password hash).

    :param id: User identifier.
    :param name: Display name.
    :param email: Email address.
    :param photo: Optional avatar URL.
    :param role: Authorization role.
    :param verified: Whether the email is verified.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: str
    name: str
    email: str
    photo: str | None
    role: Role
    verified: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: User) -> UserOut:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            photo=user.photo,
            role=user.role,
            verified=bool(user.verified),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output DTO for register/login/OAuth: the user plus a fresh token pair.

    :param user: Public user view.
    :type user: UserOut
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    :param session_id: Session anchoring the refresh token.
    :type session_id: str
    """

    user: UserOut
    access_token: str
    refresh_token: str
    session_id: str


@dataclass(frozen=True, slots=True)
class RefreshOut:
    """
    Output DTO for refresh.

    :param access_token: New access JWT (always issued).
    :type access_token: str
    :param refresh_token: New refresh JWT, only when the session was extended.
    :type refresh_token: str | None
    """

    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True, slots=True)
class PasswordResetRequestOut:
    """
    Output DTO for a password-reset request.

    :param url: Link mailed to the user (code and expiry in ms embedded).
    :param email_id: Mail provider message id.
    :param expires_at: Code expiry.
    """

    url: str
    email_id: str
    expires_at: datetime


# ------------------------------ Config DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthPolicy:
    """
    Lifetimes, limits and link settings of the auth flows.

    :param session_ttl: Session lifetime on creation and extension.
    :param session_refresh_window: Remaining lifetime at which refresh extends a session.
    :param signup_verification_ttl: Lifetime of the code issued at registration.
    :param email_verification_ttl: Lifetime of a resent verification code.
    :param password_reset_ttl: Lifetime of a password-reset code.
    :param password_reset_limit: Max reset codes per user per window.
    :param password_reset_window: Trailing window for the reset rate limit.
    :param app_origin: Frontend origin used to build emailed links.
    """

    session_ttl: timedelta = timedelta(days=30)
    session_refresh_window: timedelta = timedelta(days=1)
    signup_verification_ttl: timedelta = timedelta(days=365)
    email_verification_ttl: timedelta = timedelta(hours=24)
    password_reset_ttl: timedelta = timedelta(hours=1)
    password_reset_limit: int = 3
    password_reset_window: timedelta = timedelta(minutes=15)
    app_origin: str = "http://localhost:5173"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> AuthPolicy:
        """Build the policy from a flat Flask-style config mapping."""
        defaults = cls()
        return cls(
            session_ttl=timedelta(days=int(config.get("SESSION_TTL_DAYS", 30))),
            session_refresh_window=timedelta(
                hours=int(config.get("SESSION_REFRESH_WINDOW_HOURS", 24))
            ),
            signup_verification_ttl=timedelta(
                days=int(config.get("SIGNUP_VERIFICATION_TTL_DAYS", 365))
            ),
            email_verification_ttl=timedelta(
                hours=int(config.get("EMAIL_VERIFICATION_TTL_HOURS", 24))
            ),
            password_reset_ttl=timedelta(
                minutes=int(config.get("PASSWORD_RESET_TTL_MINUTES", 60))
            ),
            password_reset_limit=int(config.get("PASSWORD_RESET_LIMIT", 3)),
            password_reset_window=timedelta(
                minutes=int(config.get("PASSWORD_RESET_WINDOW_MINUTES", 15))
            ),
            app_origin=str(config.get("APP_ORIGIN", defaults.app_origin)).rstrip("/"),
        )
