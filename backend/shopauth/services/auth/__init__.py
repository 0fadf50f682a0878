from .dto import (
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
from .service import AuthService

__all__ = [
    "AuthPolicy",
    "AuthResultOut",
    "AuthService",
    "ChangeNameIn",
    "ChangePasswordIn",
    "LoginIn",
    "LogoutIn",
    "OAuthProfileIn",
    "PasswordResetRequestOut",
    "RefreshIn",
    "RefreshOut",
    "RegisterIn",
    "ResetPasswordIn",
    "UserOut",
]
