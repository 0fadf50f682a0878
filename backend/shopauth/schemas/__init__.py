"""Convenience exports for boundary schemas."""

from __future__ import annotations

from .auth import (
    ChangeNameSchema,
    ChangePasswordSchema,
    ForgotPasswordSchema,
    LoginSchema,
    OAuthProfileSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenResponseSchema,
    VerificationCodeSchema,
)
from .user import UserSchema

__all__ = [
    "ChangeNameSchema",
    "ChangePasswordSchema",
    "ForgotPasswordSchema",
    "LoginSchema",
    "OAuthProfileSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "TokenResponseSchema",
    "UserSchema",
    "VerificationCodeSchema",
]
