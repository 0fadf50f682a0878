# shopauth/infra/mail/logging_mailer.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import uuid4

from shopauth.services._shared.ports import Mailer, MailResult

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LoggingMailer(Mailer):
    """
    Development mailer: records the envelope in the log instead of sending.

    The body is not logged since it embeds one-time verification secrets.
    """

    sender: str = "no-reply@localhost"

    def send(self, to: str, subject: str, html: str) -> MailResult:
        message_id = str(uuid4())
        log.info(
            "mail.sent from=%s to=%s subject=%r id=%s bytes=%d",
            self.sender,
            to,
            subject,
            message_id,
            len(html),
        )
        return MailResult(id=message_id)
