"""
Abstract Unit of Work contracts.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from shopauth.repositories import (
        SessionRepository,
        UserRepository,
        VerificationCodeRepository,
    )


class SupportsCommit(Protocol):
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class UnitOfWork(ABC):
    """
    Coordinates a transactional boundary for one auth use-case.

    Responsibilities:
    - Provide ``users``, ``sessions`` and ``verification_codes`` repositories
      bound to the same session/transaction.
    - Commit on success, rollback on error.
    """

    users: UserRepository
    sessions: SessionRepository
    verification_codes: VerificationCodeRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
