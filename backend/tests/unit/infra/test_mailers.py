"""Unit tests for the mail adapters and the clock double."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from shopauth.infra.mail.logging_mailer import LoggingMailer
from shopauth.services._shared.ports import FrozenClock, InMemoryMailer


def test_logging_mailer_reports_success_without_body(caplog):
    mailer = LoggingMailer(sender="shop@example.com")
    with caplog.at_level(logging.INFO, logger="shopauth.infra.mail.logging_mailer"):
        result = mailer.send("bob@example.com", "Hello", "<p>secret-code</p>")

    assert result.ok
    assert result.id
    assert "bob@example.com" in caplog.text
    assert "secret-code" not in caplog.text


def test_in_memory_mailer_records_and_fails_on_demand():
    mailer = InMemoryMailer()
    assert mailer.last is None

    ok = mailer.send("a@example.com", "Subject", "<p>hi</p>")
    assert ok.ok
    assert mailer.last.to == "a@example.com"

    mailer.fail_with = "provider down"
    failed = mailer.send("b@example.com", "Subject", "<p>hi</p>")
    assert not failed.ok
    assert failed.error == "provider down"
    assert len(mailer.outbox) == 1


def test_frozen_clock_moves_only_when_told():
    start = datetime(2030, 5, 1, tzinfo=timezone.utc)
    clock = FrozenClock(start)
    assert clock.now() == start
    assert clock.advance(hours=2) == start + timedelta(hours=2)
    clock.set(datetime(2031, 1, 1))
    assert clock.now().tzinfo is timezone.utc
