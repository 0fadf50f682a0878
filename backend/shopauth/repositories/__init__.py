"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from shopauth.repositories.base import BaseRepository
from shopauth.repositories.session import SessionRepository
from shopauth.repositories.user import UserRepository
from shopauth.repositories.verification_code import VerificationCodeRepository

__all__ = [
    "BaseRepository",
    "SessionRepository",
    "UserRepository",
    "VerificationCodeRepository",
]
