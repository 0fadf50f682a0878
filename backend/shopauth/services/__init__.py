"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`shopauth.services` without knowing internal structure.

Re-exports
----------
- Base primitives (from ``shopauth.services._shared.base``)
    * :class:`BaseService`
    * :class:`ServiceContext`

- Managers
    * :class:`SessionManager` (from ``shopauth.services.sessions``)
    * :class:`VerificationCodeManager` (from ``shopauth.services.verification``)

- Auth service (from ``shopauth.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`OAuthProfileIn`,
      :class:`RefreshIn`, :class:`LogoutIn`, :class:`ChangeNameIn`,
      :class:`ChangePasswordIn`, :class:`ResetPasswordIn`, :class:`UserOut`,
      :class:`AuthResultOut`, :class:`RefreshOut`, :class:`PasswordResetRequestOut`
"""

from __future__ import annotations

# Base primitives (service base + request-scoped context)
from ._shared.base import BaseService, ServiceContext

# Auth service + DTOs
from .auth import (
    AuthPolicy,
    AuthResultOut,
    AuthService,
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

# Managers
from .sessions import SessionManager
from .verification import IssuedCode, VerificationCodeManager

__all__ = [
    # Base
    "BaseService",
    "ServiceContext",
    # Managers
    "SessionManager",
    "IssuedCode",
    "VerificationCodeManager",
    # Auth
    "AuthService",
    "AuthPolicy",
    "RegisterIn",
    "LoginIn",
    "OAuthProfileIn",
    "RefreshIn",
    "LogoutIn",
    "ChangeNameIn",
    "ChangePasswordIn",
    "ResetPasswordIn",
    "UserOut",
    "AuthResultOut",
    "RefreshOut",
    "PasswordResetRequestOut",
]
