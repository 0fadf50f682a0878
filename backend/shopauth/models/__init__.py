from shopauth.models.session import UserSession
from shopauth.models.user import Role, User
from shopauth.models.verification_code import VerificationCode, VerificationCodeType

__all__ = [
    "Role",
    "User",
    "UserSession",
    "VerificationCode",
    "VerificationCodeType",
]
