# shopauth/services/_shared/base.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from shopauth.core import errors as api_errors
from shopauth.models.user import Role
from shopauth.services._shared.errors import (
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    ConflictError,
    DeliveryError,
    NotFoundError,
    RateLimitError,
    ServiceError,
)
from shopauth.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


@dataclass(frozen=True, slots=True)
class ServiceContext:
    """
    Authenticated, request-scoped identity resolved from an access token.

    :param user_id: Authenticated user identifier.
    :param session_id: Session referenced by the access token.
    :param role: Role claim snapshot.
    :param email: Email claim snapshot.
    :param verified: Whether the email was verified at token issuance.
    :param request_id: Correlation id for logging/tracing.
    """

    user_id: str
    session_id: str
    role: Role = Role.USER
    email: str | None = None
    verified: bool = False
    request_id: str | None = None


# Service error type -> API error factory
_TRANSLATIONS: tuple[tuple[type[ServiceError], Callable[[str], api_errors.APIError]], ...] = (
    (NotFoundError, api_errors.NotFound),
    (ConflictError, api_errors.Conflict),
    (AuthenticationError, api_errors.Unauthorized),
    (AuthorizationError, api_errors.Forbidden),
    (RateLimitError, api_errors.TooManyRequests),
    (DeliveryError, api_errors.InternalServerError),
    (BadRequestError, api_errors.BadRequest),
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize error translation.
    * Offer the shared role check.

    Notes
    -----
    Services never touch the global session directly; always use a Unit of Work.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    def __init__(self, *, ctx: ServiceContext | None = None) -> None:
        """
        :param ctx: Optional request-scoped context.
        :type ctx: ServiceContext | None
        """
        self.ctx = ctx

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(self, exc: Exception) -> Exception:
        """
        Map service-level errors to API-level (HTTP) errors.

        :param exc: Exception raised within the service.
        :returns: Translated exception, or ``exc`` untouched when unknown.
        :rtype: Exception
        """
        for service_type, api_type in _TRANSLATIONS:
            if isinstance(exc, service_type):
                return api_type(str(exc))

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.BadRequest(str(exc))

        return exc

    # --------------------------- AuthZ --------------------------------

    def ensure_role(self, ctx: ServiceContext | None, *roles: Role) -> ServiceContext:
        """
        Ensure the caller is authenticated and holds one of ``roles``.

        :param ctx: Resolved context (``None`` when unauthenticated).
        :param roles: Accepted roles; empty means any authenticated caller.
        :returns: The same context, for chaining.
        :raises AuthenticationError: When ``ctx`` is missing.
        :raises AuthorizationError: When the role is not accepted.
        """
        if ctx is None:
            raise AuthenticationError("Not authorized")
        if roles and ctx.role not in roles:
            raise AuthorizationError("You do not have permission to perform this action")
        return ctx
