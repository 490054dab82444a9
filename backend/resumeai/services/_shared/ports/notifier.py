from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """
    Port for transactional account emails.

    Implementations raise on delivery failure; callers decide whether a
    failure is fatal.
    """

    def send_verification(self, email: str, name: str, token: str) -> None: ...
    def send_password_reset(self, email: str, name: str, token: str) -> None: ...
    def send_welcome(self, email: str, name: str) -> None: ...


@dataclass(frozen=True, slots=True)
class SentMessage:
    """Record of a message captured by :class:`InMemoryNotifier`."""

    kind: str
    email: str
    name: str
    token: str | None = None


@dataclass
class InMemoryNotifier(Notifier):
    """Outbox notifier used when no SMTP server is configured and in tests.

    Messages are appended to :attr:`outbox` and logged without their token.
    """

    outbox: list[SentMessage] = field(default_factory=list)

    def _record(self, kind: str, email: str, name: str, token: str | None = None) -> None:
        self.outbox.append(SentMessage(kind=kind, email=email, name=name, token=token))
        logger.info("Queued %s email for %s", kind, email, extra={"event": f"mail.{kind}"})

    def send_verification(self, email: str, name: str, token: str) -> None:
        self._record("verification", email, name, token)

    def send_password_reset(self, email: str, name: str, token: str) -> None:
        self._record("password_reset", email, name, token)

    def send_welcome(self, email: str, name: str) -> None:
        self._record("welcome", email, name)

    def last(self, kind: str | None = None) -> SentMessage | None:
        """Return the most recent message, optionally of a given kind."""
        for message in reversed(self.outbox):
            if kind is None or message.kind == kind:
                return message
        return None
