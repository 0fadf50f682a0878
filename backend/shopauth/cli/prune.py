"""Flask CLI commands for auth housekeeping."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from shopauth.services._shared.ports import SystemClock
from shopauth.services.sessions import SessionManager
from shopauth.services.verification import VerificationCodeManager
from shopauth.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("auth")
def auth_cli() -> None:
    """Session and verification-code maintenance commands."""


@auth_cli.command("prune")
@click.option("--dry-run", is_flag=True, help="Report what would be deleted, then roll back.")
@with_appcontext
def prune_command(dry_run: bool) -> None:
    """Delete expired sessions and verification codes."""
    clock = SystemClock()
    uow = SQLAlchemyUnitOfWork()
    try:
        sessions = SessionManager(clock=clock).prune(uow)
        codes = VerificationCodeManager(clock=clock).prune(uow)
        if dry_run:
            uow.rollback()
        else:
            uow.commit()
    except Exception as exc:  # pragma: no cover - CLI safeguard
        uow.rollback()
        raise click.ClickException(f"Prune failed: {exc}") from exc

    LOGGER.info("Pruned %d session(s) and %d code(s)", sessions, codes)
    verb = "Would delete" if dry_run else "Deleted"
    click.echo(f"{verb} {sessions} expired session(s) and {codes} expired verification code(s).")
