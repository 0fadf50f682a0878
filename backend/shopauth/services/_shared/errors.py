"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
types. Each carries the HTTP-style ``status_code`` the transport maps it to;
the translation to RFC 7807 responses happens in ``shopauth/core/errors.py``
via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.

    Notes
    -----
    SQLite reports the offending columns instead of the constraint name
    (``UNIQUE constraint failed: users.email``); the ``uq_<table>_<column>``
    naming convention lets both forms match.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    needle = constraint_name.lower()
    if needle in message:
        return True
    if needle.startswith("uq_"):
        for table_column in _column_refs(message):
            if "uq_" + table_column.replace(".", "_") == needle:
                return True
    return False


def _column_refs(message: str) -> list[str]:
    _, _, tail = message.partition("unique constraint failed:")
    return [part.strip() for part in tail.split(",") if part.strip()]


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors; ``status_code`` is a hint for the transport.
    - They can be safely raised from repositories or domain logic.
    """

    status_code = 400

    def __init__(self, message: str = "Bad request") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


class BadRequestError(ServiceError):
    """Malformed input or a rejected state transition."""


class AuthenticationError(ServiceError):
    """Bad credentials, invalid or expired token, or expired session."""

    status_code = 401

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message)


class AuthorizationError(ServiceError):
    """Authenticated caller lacks the required role."""

    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key, omitted from the message when ``None``.
    :type key: str | None
    """

    entity: str
    key: str | None = None
    status_code = 404

    def __str__(self) -> str:
        if self.key is None:
            return f"{self.entity} not found"
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True, eq=False)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Client-safe explanation, used as the message.
    :type detail: str
    """

    entity: str
    detail: str
    status_code = 409

    def __str__(self) -> str:
        return self.detail


class RateLimitError(ServiceError):
    """Too many requests of one kind within the trailing window."""

    status_code = 429


class DeliveryError(ServiceError):
    """An external collaborator (mail provider) failed to deliver."""

    status_code = 500
