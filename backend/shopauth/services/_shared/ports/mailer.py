from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Protocol
from uuid import uuid4


@dataclass(frozen=True, slots=True)
class MailResult:
    """
    Outcome of a send attempt: a provider message id or an error string.

    :ivar id: Provider message identifier on success.
    :ivar error: Human-readable failure description otherwise.
    """

    id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.id is not None


@dataclass(frozen=True, slots=True)
class OutgoingMail:
    to: str
    subject: str
    html: str


class Mailer(Protocol):
    """Port for outbound email. Implementations report failures, never raise."""

    def send(self, to: str, subject: str, html: str) -> MailResult: ...


class InMemoryMailer(Mailer):
    """
    Thread-safe in-memory mailer for tests.

    Keeps every accepted message in :attr:`outbox`; set :attr:`fail_with` to
    an error string to make subsequent sends fail.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.outbox: list[OutgoingMail] = []
        self.fail_with: str | None = None

    def send(self, to: str, subject: str, html: str) -> MailResult:
        with self._lock:
            if self.fail_with is not None:
                return MailResult(error=self.fail_with)
            self.outbox.append(OutgoingMail(to=to, subject=subject, html=html))
            return MailResult(id=str(uuid4()))

    @property
    def last(self) -> OutgoingMail | None:
        with self._lock:
            return self.outbox[-1] if self.outbox else None
