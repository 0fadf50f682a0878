# shopauth/services/auth/service.py
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from werkzeug.security import check_password_hash

from shopauth.models.session import UserSession
from shopauth.models.user import Role, User, hash_password
from shopauth.models.verification_code import VerificationCodeType
from shopauth.repositories.user import UserRepository
from shopauth.services._shared.base import BaseService, ServiceContext
from shopauth.services._shared.errors import (
    AuthenticationError,
    BadRequestError,
    ConflictError,
    DeliveryError,
    NotFoundError,
    RateLimitError,
    violates,
)
from shopauth.services._shared.ports import (
    Clock,
    Mailer,
    MailResult,
    SystemClock,
    TokenError,
    TokenKind,
    TokenProvider,
)
from shopauth.services.auth.dto import (
    AuthPolicy,
    AuthResultOut,
    ChangeNameIn,
    ChangePasswordIn,
    LoginIn,
    LogoutIn,
    OAuthProfileIn,
    PasswordResetRequestOut,
    RefreshIn,
    RefreshOut,
    RegisterIn,
    ResetPasswordIn,
    UserOut,
)
from shopauth.services.auth.templates import password_reset_template, verify_email_template
from shopauth.services.sessions import SessionManager
from shopauth.services.verification import VerificationCodeManager

log = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AuthService(BaseService):
    """
    Authentication lifecycle service.

    Composes the credential store (through Units of Work), the
    :class:`SessionManager`, the :class:`VerificationCodeManager`, a
    :class:`TokenProvider` and a :class:`Mailer` into the register / login /
    refresh / logout / verification / password flows.

    Access tokens carry ``user_id``, ``session_id`` and profile claims
    (``email``, ``role``, ``verified``, ``name``, ``photo``); refresh tokens
    carry ``session_id`` only and are honoured while that session row lives.
    """

    def __init__(
        self,
        *,
        token_provider: TokenProvider,
        mailer: Mailer,
        clock: Clock | None = None,
        policy: AuthPolicy | None = None,
        sessions: SessionManager | None = None,
        codes: VerificationCodeManager | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_provider: Adapter for signing/verifying JWTs.
        :param mailer: Outbound email adapter.
        :param clock: Source of "now"; shared with the managers built here.
        :param policy: Lifetimes, limits and link origin.
        :param sessions: Session manager (built from ``clock``/``policy`` when omitted).
        :param codes: Verification-code manager (built from ``clock`` when omitted).
        """
        super().__init__(ctx=ctx)
        self.tokens = token_provider
        self.mailer = mailer
        self.clock = clock or SystemClock()
        self.policy = policy or AuthPolicy()
        self.sessions = sessions or SessionManager(
            clock=self.clock,
            ttl=self.policy.session_ttl,
            refresh_window=self.policy.session_refresh_window,
        )
        self.codes = codes or VerificationCodeManager(clock=self.clock)
        self._dummy_hash: str | None = None

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create an unverified account, open a session and issue a token pair.

        The verification email is sent after commit; a delivery failure is
        logged and does not fail the registration.

        :param dto: Registration input.
        :returns: Public user plus token pair.
        :raises ConflictError: If the email is already registered.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(dto.email):
                raise ConflictError("User", "Email already exists")

            try:
                user = repo.add(User(name=dto.name, email=dto.email, password=dto.password))
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", "Email already exists") from exc
                raise

            code = self.codes.issue(
                uow,
                user.id,
                VerificationCodeType.EMAIL_VERIFICATION,
                self.policy.signup_verification_ttl,
            )
            session = self.sessions.create(uow, user.id, dto.user_agent)
            result = self._auth_result(user, session)

        sent = self._send_verification_email(result.user.email, code.token)
        if not sent.ok:
            log.error(
                "Verification email failed: %s",
                sent.error,
                extra={"event": "auth.registered", "user_id": result.user.id},
            )
        log.info(
            "User registered",
            extra={
                "event": "auth.registered",
                "user_id": result.user.id,
                "session_id": result.session_id,
            },
        )
        return result

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials, open a session and issue a token pair.

        A missing account, an OAuth-only account and a wrong password all
        fail with the same message and comparable timing.

        :param dto: Login input.
        :raises AuthenticationError: On any credential mismatch.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None or not user.has_password:
                # Burn a hash check so unknown emails are not faster to reject
                check_password_hash(self._dummy_password_hash(), dto.password)
                raise self._invalid_credentials()
            if not user.verify_password(dto.password):
                raise self._invalid_credentials()

            session = self.sessions.create(uow, user.id, dto.user_agent)
            result = self._auth_result(user, session)

        log.info(
            "User logged in",
            extra={
                "event": "auth.login",
                "user_id": result.user.id,
                "session_id": result.session_id,
            },
        )
        return result

    def oauth_login(self, profile: OAuthProfileIn) -> AuthResultOut:
        """
        Sign in with a provider profile, creating a verified account on first use.

        Accounts are keyed by email; an existing account is reused unchanged.

        :raises AuthenticationError: If the provider did not report an email.
        """
        if not profile.email or not profile.email.strip():
            raise AuthenticationError(f"No email found from {profile.provider}")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(profile.email)
            if user is None:
                fallback_name = profile.email.strip().split("@", 1)[0]
                try:
                    user = repo.add(
                        User(
                            name=(profile.name or "").strip() or fallback_name,
                            email=profile.email,
                            photo=profile.photo,
                            verified=True,
                        )
                    )
                except IntegrityError as exc:
                    if violates(exc, "uq_users_email"):
                        raise ConflictError("User", "Email already exists") from exc
                    raise

            session = self.sessions.create(uow, user.id, profile.user_agent)
            result = self._auth_result(user, session)

        log.info(
            "User logged in via %s",
            profile.provider,
            extra={
                "event": "auth.login",
                "user_id": result.user.id,
                "session_id": result.session_id,
            },
        )
        return result

    # ------------------------------------------------------------------ #
    # Refresh / logout
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> RefreshOut:
        """
        Mint a new access token from a refresh token.

        The referenced session must exist and be unexpired. When it is inside
        the refresh window its expiry is pushed forward and a new refresh token
        is returned; otherwise ``refresh_token`` is ``None``.

        :raises AuthenticationError: If the token is invalid or the session is gone/expired.
        """
        verification = self.tokens.verify(dto.refresh_token, TokenKind.REFRESH)
        session_id = verification.payload.get("session_id") if verification.ok else None
        if not isinstance(session_id, str):
            raise AuthenticationError("Invalid refresh token")

        with self.rw_uow() as uow:
            session = self.sessions.get_live(uow, session_id)
            user = uow.users.get(session.user_id) if session is not None else None
            if session is None or user is None:
                raise AuthenticationError("Session expired or invalid")

            rotated = self.sessions.touch(uow, session)
            access_token = self.tokens.sign(self._access_claims(user, session.id), TokenKind.ACCESS)
            refresh_token = (
                self.tokens.sign({"session_id": session.id}, TokenKind.REFRESH) if rotated else None
            )
            user_id = user.id

        log.info(
            "Access token refreshed",
            extra={"event": "auth.refresh", "user_id": user_id, "session_id": session_id},
        )
        return RefreshOut(access_token=access_token, refresh_token=refresh_token)

    def logout(self, dto: LogoutIn) -> None:
        """
        Delete the session referenced by the access token.

        Best-effort: a missing or unverifiable token still counts as success.
        """
        if not dto.access_token:
            return
        verification = self.tokens.verify(dto.access_token, TokenKind.ACCESS)
        if not verification.ok:
            return
        session_id = verification.payload.get("session_id")
        if not isinstance(session_id, str):
            return

        with self.rw_uow() as uow:
            self.sessions.revoke(uow, session_id)

        log.info(
            "User logged out",
            extra={
                "event": "auth.logout",
                "user_id": verification.payload.get("user_id"),
                "session_id": session_id,
            },
        )

    # ------------------------------------------------------------------ #
    # Profile
    # ------------------------------------------------------------------ #

    def get_profile(self, user_id: str) -> UserOut:
        """
        Return the public view of ``user_id``.

        :raises NotFoundError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User")
            return UserOut.from_model(user)

    def change_name(self, dto: ChangeNameIn) -> UserOut:
        """
        Rename the user.

        :raises BadRequestError: If the trimmed name is empty.
        :raises NotFoundError: If the user does not exist.
        """
        name = (dto.name or "").strip()
        if not name:
            raise BadRequestError("Name cannot be empty")

        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(dto.user_id)
            if user is None:
                raise NotFoundError("User")
            repo.update(user, name=name)
            return UserOut.from_model(user)

    # ------------------------------------------------------------------ #
    # Password lifecycle
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the password and revoke every session of the user, atomically.

        :raises NotFoundError: If the user does not exist.
        :raises BadRequestError: If no password is set or the new one equals the old one.
        :raises AuthenticationError: If the current password does not match.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_for_update(dto.user_id)
            if user is None:
                raise NotFoundError("User")
            if not user.has_password:
                raise BadRequestError("This account does not have a password set")
            if not user.verify_password(dto.current_password):
                raise AuthenticationError("Incorrect current password")
            if user.verify_password(dto.new_password):
                raise BadRequestError("New password cannot be the same as the old password")

            repo.update_password(user, dto.new_password)
            revoked = self.sessions.revoke_all(uow, user.id)

        log.info(
            "Password changed, %d session(s) revoked",
            revoked,
            extra={"event": "auth.password_changed", "user_id": dto.user_id},
        )

    def request_password_reset(self, email: str) -> PasswordResetRequestOut:
        """
        Issue a password-reset code and mail the reset link.

        :param email: Account email.
        :returns: The mailed link, provider message id and code expiry.
        :raises NotFoundError: If no account uses ``email``.
        :raises RateLimitError: If the per-user limit for the trailing window is reached.
        :raises DeliveryError: If the mail provider rejects the message.
        """
        with self.rw_uow() as uow:
            user = uow.users.get_by_email(email)
            if user is None:
                raise NotFoundError("User")

            recent = self.codes.count_recent(
                uow,
                user.id,
                VerificationCodeType.PASSWORD_RESET,
                self.policy.password_reset_window,
            )
            if recent >= self.policy.password_reset_limit:
                minutes = int(self.policy.password_reset_window.total_seconds() // 60)
                raise RateLimitError(
                    f"Password reset limit reached. Try again in {minutes} minutes."
                )

            code = self.codes.issue(
                uow,
                user.id,
                VerificationCodeType.PASSWORD_RESET,
                self.policy.password_reset_ttl,
            )
            user_id, to = user.id, user.email

        expires_ms = int(code.expires_at.timestamp() * 1000)
        url = f"{self.policy.app_origin}/auth/password/reset?code={code.token}&exp={expires_ms}"
        subject, html = password_reset_template(url)
        sent = self.mailer.send(to, subject, html)
        if not sent.ok:
            log.error(
                "Password reset email failed: %s",
                sent.error,
                extra={"event": "auth.password_reset_requested", "user_id": user_id},
            )
            raise DeliveryError("Failed to send password reset email")

        log.info(
            "Password reset requested",
            extra={"event": "auth.password_reset_requested", "user_id": user_id},
        )
        return PasswordResetRequestOut(url=url, email_id=str(sent.id), expires_at=code.expires_at)

    def reset_password(self, dto: ResetPasswordIn) -> UserOut:
        """
        Redeem a reset code: set the password, delete the code and every session.

        All three writes commit together or not at all.

        :raises ConflictError: If the code is unknown or expired.
        """
        with self.rw_uow() as uow:
            code = self.codes.redeem(uow, dto.code, VerificationCodeType.PASSWORD_RESET)
            if code is None:
                raise ConflictError("VerificationCode", "Invalid or expired verification code")

            repo: UserRepository = uow.users
            user = repo.get_for_update(code.user_id)
            if user is None or not self.codes.consume(uow, code):
                raise ConflictError("VerificationCode", "Invalid or expired verification code")

            repo.update_password(user, dto.password)
            self.sessions.revoke_all(uow, user.id)
            out = UserOut.from_model(user)

        log.info("Password reset", extra={"event": "auth.password_reset", "user_id": out.id})
        return out

    # ------------------------------------------------------------------ #
    # Email verification
    # ------------------------------------------------------------------ #

    def verify_email(self, code: str) -> UserOut:
        """
        Mark the owner of ``code`` verified and delete the code, atomically.

        :raises AuthenticationError: If the code is unknown, already used or expired.
        """
        with self.rw_uow() as uow:
            found = self.codes.redeem(uow, code, VerificationCodeType.EMAIL_VERIFICATION)
            user = uow.users.get(found.user_id) if found is not None else None
            if found is None or user is None or not self.codes.consume(uow, found):
                raise AuthenticationError("The verification code has expired or is invalid")

            uow.users.update(user, verified=True)
            out = UserOut.from_model(user)

        log.info("Email verified", extra={"event": "auth.email_verified", "user_id": out.id})
        return out

    def resend_verification(self, user_id: str) -> None:
        """
        Replace the user's verification code and mail it again.

        :raises NotFoundError: If the user does not exist.
        :raises BadRequestError: If already verified or the mail cannot be sent.
        """
        with self.rw_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User")
            if user.verified:
                raise BadRequestError("User already verified")

            code = self.codes.issue(
                uow,
                user.id,
                VerificationCodeType.EMAIL_VERIFICATION,
                self.policy.email_verification_ttl,
            )
            to = user.email

        sent = self._send_verification_email(to, code.token)
        if not sent.ok:
            log.error("Verification email failed: %s", sent.error, extra={"user_id": user_id})
            raise BadRequestError("Failed to send verification email")

    # ------------------------------------------------------------------ #
    # Request authentication
    # ------------------------------------------------------------------ #

    def resolve_context(self, access_token: str | None) -> ServiceContext:
        """
        Turn an access token into a typed :class:`ServiceContext`.

        :raises AuthenticationError: "Not authorized" when absent, "Token expired"
            when expired and "Invalid token" otherwise.
        """
        if not access_token:
            raise AuthenticationError("Not authorized")

        verification = self.tokens.verify(access_token, TokenKind.ACCESS)
        if verification.error is TokenError.EXPIRED:
            raise AuthenticationError("Token expired")
        if not verification.ok:
            raise AuthenticationError("Invalid token")

        payload = verification.payload
        user_id, session_id = payload.get("user_id"), payload.get("session_id")
        if not isinstance(user_id, str) or not isinstance(session_id, str):
            raise AuthenticationError("Invalid token")
        try:
            role = Role(payload.get("role", Role.USER.value))
        except ValueError as exc:
            raise AuthenticationError("Invalid token") from exc

        return ServiceContext(
            user_id=user_id,
            session_id=session_id,
            role=role,
            email=payload.get("email"),
            verified=bool(payload.get("verified", False)),
        )

    # ------------------------------------------------------------------ #
    # Utilities
    # ------------------------------------------------------------------ #

    @staticmethod
    def _access_claims(user: User, session_id: str) -> dict[str, Any]:
        return {
            "user_id": user.id,
            "session_id": session_id,
            "email": user.email,
            "role": user.role.value,
            "verified": bool(user.verified),
            "name": user.name,
            "photo": user.photo,
        }

    def _auth_result(self, user: User, session: UserSession) -> AuthResultOut:
        access = self.tokens.sign(self._access_claims(user, session.id), TokenKind.ACCESS)
        refresh = self.tokens.sign({"session_id": session.id}, TokenKind.REFRESH)
        return AuthResultOut(
            user=UserOut.from_model(user),
            access_token=access,
            refresh_token=refresh,
            session_id=session.id,
        )

    def _send_verification_email(self, to: str, token: str) -> MailResult:
        url = f"{self.policy.app_origin}/auth/email/verify/{token}"
        subject, html = verify_email_template(url)
        return self.mailer.send(to, subject, html)

    def _dummy_password_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = hash_password("not-a-real-password")
        return self._dummy_hash

    @staticmethod
    def _invalid_credentials() -> AuthenticationError:
        log.warning("Login failed", extra={"event": "auth.login_failed"})
        return AuthenticationError(INVALID_CREDENTIALS)
