"""Security sub-record of a user account as an immutable value object.

Services never poke at the individual security columns. They read
:attr:`resumeai.models.user.User.security`, ask the snapshot for the next
state, and assign it back in one go::

    user.security = user.security.record_login(now)

Single-use tokens handed to users (password reset, email verification) are
random hex strings; only their SHA-256 digest is kept in the record.
"""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass, replace
from datetime import datetime, timedelta

TOKEN_BYTES = 32


def new_token() -> str:
    """Return a fresh 256-bit random token encoded as 64 hex characters."""
    return secrets.token_hex(TOKEN_BYTES)


def digest_token(token: str) -> str:
    """Return the hex SHA-256 digest under which ``token`` is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


@dataclass(frozen=True, slots=True)
class SecurityState:
    """Snapshot of login bookkeeping and pending single-use tokens.

    Attributes
    ----------
    last_login : datetime | None
        Time of the last successful login.
    login_attempts : int
        Consecutive failed logins since the last success or lock.
    lock_until : datetime | None
        Logins are refused while this is in the future.
    password_reset_token : str | None
        Digest of the outstanding password-reset token.
    password_reset_expires : datetime | None
        Expiry of the outstanding password-reset token.
    email_verification_token : str | None
        Digest of the outstanding email-verification token.
    email_verified : bool
        Whether the address has been confirmed.
    """

    last_login: datetime | None = None
    login_attempts: int = 0
    lock_until: datetime | None = None
    password_reset_token: str | None = None
    password_reset_expires: datetime | None = None
    email_verification_token: str | None = None
    email_verified: bool = False

    # -------------------- Queries --------------------
    def is_locked(self, now: datetime) -> bool:
        return self.lock_until is not None and self.lock_until > now

    # -------------------- Transitions --------------------
    def record_login(self, now: datetime) -> SecurityState:
        return replace(self, last_login=now, login_attempts=0, lock_until=None)

    def record_failed_login(
        self, now: datetime, *, max_attempts: int, lock_for: timedelta
    ) -> SecurityState:
        """Count a failed login, locking the account once the budget is spent.

        A lock that has already expired is discarded and counting restarts.
        Reaching ``max_attempts`` sets ``lock_until = now + lock_for`` and
        resets the counter, so the next window starts clean.
        """
        attempts = self.login_attempts
        lock_until = self.lock_until
        if lock_until is not None and lock_until <= now:
            attempts, lock_until = 0, None
        attempts += 1
        if attempts >= max_attempts:
            return replace(self, login_attempts=0, lock_until=now + lock_for)
        return replace(self, login_attempts=attempts, lock_until=lock_until)

    def issue_reset_token(self, digest: str, expires_at: datetime) -> SecurityState:
        # Overwrites any previous token.
        return replace(self, password_reset_token=digest, password_reset_expires=expires_at)

    def consume_reset_token(self) -> SecurityState:
        """Clear the reset token along with any lockout it was used to escape."""
        return replace(
            self,
            password_reset_token=None,
            password_reset_expires=None,
            login_attempts=0,
            lock_until=None,
        )

    def issue_verification_token(self, digest: str) -> SecurityState:
        return replace(self, email_verification_token=digest)

    def mark_email_verified(self) -> SecurityState:
        return replace(self, email_verified=True, email_verification_token=None)
