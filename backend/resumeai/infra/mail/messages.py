"""Subjects and bodies of the transactional account emails."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from html import escape
from urllib.parse import urlencode


@dataclass(frozen=True, slots=True)
class MailContent:
    subject: str
    text: str
    html: str


def _link(frontend_url: str, path: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/{path}?{urlencode({'token': token})}"


def _wrap(app_name: str, heading: str, body: str) -> str:
    year = datetime.now(UTC).year
    return (
        "<!DOCTYPE html><html><body>"
        f"<h1>{escape(heading)}</h1>{body}"
        f"<p>Best regards,<br>The {escape(app_name)} Team</p>"
        f"<p>&copy; {year} {escape(app_name)}. All rights reserved.</p>"
        "</body></html>"
    )


def verification_email(*, app_name: str, frontend_url: str, name: str, token: str) -> MailContent:
    url = _link(frontend_url, "verify-email", token)
    text = (
        f"Hi {name},\n\n"
        f"Please confirm your email address for {app_name}:\n{url}\n\n"
        "If you did not create an account, you can ignore this email.\n"
    )
    body = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>Please confirm your email address for {escape(app_name)}.</p>"
        f'<p><a href="{escape(url)}">Verify Email</a></p>'
        f"<p>If the button doesn't work, paste this link into your browser: {escape(url)}</p>"
    )
    return MailContent(
        subject=f"Please Verify Your Email - {app_name}",
        text=text,
        html=_wrap(app_name, "Verify your email", body),
    )


def password_reset_email(
    *, app_name: str, frontend_url: str, name: str, token: str
) -> MailContent:
    url = _link(frontend_url, "reset-password", token)
    text = (
        f"Hi {name},\n\n"
        f"We received a request to reset your {app_name} password.\n"
        f"Reset your password: {url}\n\n"
        "This link expires in 1 hour. If you did not ask for it, ignore this email.\n"
    )
    body = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>We received a request to reset your password for your {escape(app_name)} account.</p>"
        f'<p><a href="{escape(url)}">Reset Your Password</a></p>'
        "<p>This link expires in 1 hour.</p>"
        f"<p>If the button doesn't work, paste this link into your browser: {escape(url)}</p>"
    )
    return MailContent(
        subject=f"Reset Your Password - {app_name}",
        text=text,
        html=_wrap(app_name, "Password Reset Request", body),
    )


def welcome_email(*, app_name: str, frontend_url: str, name: str) -> MailContent:
    text = (
        f"Hi {name},\n\n"
        f"Thank you for joining {app_name}. Upload your first resume at "
        f"{frontend_url.rstrip('/')}/dashboard to get started.\n"
    )
    body = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>Thank you for joining {escape(app_name)}. We're excited to help you "
        "optimize your resume and advance your career!</p>"
    )
    return MailContent(
        subject=f"Welcome to {app_name}!",
        text=text,
        html=_wrap(app_name, f"Welcome to {app_name}!", body),
    )
