"""HTML bodies for the transactional auth emails."""

from __future__ import annotations

from html import escape

VERIFY_EMAIL_SUBJECT = "Verify Email Address"
PASSWORD_RESET_SUBJECT = "Password Reset Request"

_LAYOUT = """<!doctype html>
<html>
  <body style="font-family: Arial, sans-serif; background: #f4f4f4; padding: 24px;">
    <div style="max-width: 560px; margin: 0 auto; background: #ffffff; padding: 24px;">
      <h2 style="margin-top: 0;">{title}</h2>
      <p>{lead}</p>
      <p><a href="{url}" style="background: #2563eb; color: #ffffff; padding: 10px 18px;
         text-decoration: none; border-radius: 4px;">{action}</a></p>
      <p style="color: #6b7280; font-size: 12px;">{footer}</p>
    </div>
  </body>
</html>
"""


def verify_email_template(url: str) -> tuple[str, str]:
    """Return ``(subject, html)`` for the email-verification message."""
    html = _LAYOUT.format(
        title="Verify your email",
        lead="Click the button below to verify your email address.",
        url=escape(url, quote=True),
        action="Verify Email",
        footer="If you did not create an account, you can ignore this email.",
    )
    return VERIFY_EMAIL_SUBJECT, html


def password_reset_template(url: str) -> tuple[str, str]:
    """Return ``(subject, html)`` for the password-reset message."""
    html = _LAYOUT.format(
        title="Reset your password",
        lead="You requested a password reset. Click the button below to choose a new one.",
        url=escape(url, quote=True),
        action="Reset Password",
        footer="This link expires in one hour. If you did not request it, ignore this email.",
    )
    return PASSWORD_RESET_SUBJECT, html
