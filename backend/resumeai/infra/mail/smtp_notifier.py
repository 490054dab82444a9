from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr

from flask import Flask

from resumeai.infra.mail import messages
from resumeai.services._shared.ports import Notifier

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SmtpNotifier(Notifier):
    """
    Deliver account emails over SMTP.

    Port 465 (or ``use_ssl``) connects with implicit TLS; otherwise the
    connection is upgraded with STARTTLS when ``use_tls`` is set. Delivery
    errors propagate to the caller.
    """

    host: str
    port: int = 587
    username: str | None = None
    password: str | None = None
    use_tls: bool = True
    use_ssl: bool = False
    sender: str | None = None
    timeout: int = 12
    app_name: str = "AI Resume Analyzer"
    frontend_url: str = "http://localhost:3000"

    @classmethod
    def from_app(cls, app: Flask) -> SmtpNotifier:
        cfg = app.config
        return cls(
            host=cfg["MAIL_SERVER"],
            port=cfg["MAIL_PORT"],
            username=cfg.get("MAIL_USERNAME"),
            password=cfg.get("MAIL_PASSWORD"),
            use_tls=cfg.get("MAIL_USE_TLS", True),
            use_ssl=cfg.get("MAIL_USE_SSL", False),
            sender=cfg.get("MAIL_DEFAULT_SENDER"),
            timeout=cfg.get("MAIL_TIMEOUT", 12),
            app_name=cfg.get("APP_NAME", "AI Resume Analyzer"),
            frontend_url=cfg.get("FRONTEND_URL", "http://localhost:3000"),
        )

    # ------------------------------ Transport --------------------------------

    def build_message(self, to_email: str, content: messages.MailContent) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = content.subject
        msg["From"] = formataddr((self.app_name, self.sender or self.username or ""))
        msg["To"] = to_email
        msg.set_content(content.text)
        msg.add_alternative(content.html, subtype="html")
        return msg

    def _send(self, to_email: str, content: messages.MailContent) -> None:
        msg = self.build_message(to_email, content)
        use_ssl = self.port == 465 or self.use_ssl
        if use_ssl:
            with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
                self._login(server)
                server.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                self._login(server)
                server.send_message(msg)
        logger.info("Email sent to %s", to_email, extra={"event": "mail.sent"})

    def _login(self, server: smtplib.SMTP) -> None:
        if self.username and self.password:
            server.login(self.username, self.password)

    # ------------------------------ Notifier ---------------------------------

    def send_verification(self, email: str, name: str, token: str) -> None:
        self._send(
            email,
            messages.verification_email(
                app_name=self.app_name, frontend_url=self.frontend_url, name=name, token=token
            ),
        )

    def send_password_reset(self, email: str, name: str, token: str) -> None:
        self._send(
            email,
            messages.password_reset_email(
                app_name=self.app_name, frontend_url=self.frontend_url, name=name, token=token
            ),
        )

    def send_welcome(self, email: str, name: str) -> None:
        self._send(
            email,
            messages.welcome_email(
                app_name=self.app_name, frontend_url=self.frontend_url, name=name
            ),
        )
