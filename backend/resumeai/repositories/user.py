"""User repository for persistence and credential lookups."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import undefer

from resumeai.models.user import User
from resumeai.repositories.base import BaseRepository


def _normalize(email: str) -> str:
    return email.strip().lower()


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    Lookups by email and by single-use token digest. It never issues JWTs or
    decides lockout policy; the auth service does.
    """

    model = User

    def get_by_email(
        self, email: str, *, with_password: bool = False, for_update: bool = False
    ) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :param with_password: Load the deferred ``password_hash`` column in
            the same query, for credential checks.
        :type with_password: bool
        :param for_update: Lock the row so concurrent logins update the
            failure counter one at a time.
        :type for_update: bool
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == _normalize(email))
        if with_password:
            stmt = stmt.options(undefer(User.password_hash))
        return self._first(stmt, for_update=for_update)

    def exists_by_email(self, email: str) -> bool:
        stmt = select(User.id).where(User.email == _normalize(email))
        return self.session.execute(stmt.limit(1)).first() is not None

    def get_by_reset_token(self, digest: str, *, now: datetime) -> User | None:
        """Return the user holding an unexpired password-reset token.

        :param digest: SHA-256 digest of the presented token.
        :param now: Reference instant; tokens expiring at or before it are ignored.
        :returns: Matching user or ``None``.
        """
        stmt = select(User).where(
            User.password_reset_token == digest,
            User.password_reset_expires > now,
        )
        return self._first(stmt)

    def get_by_verification_token(self, digest: str) -> User | None:
        """Return the user holding the given email-verification token digest."""
        return self._first(select(User).where(User.email_verification_token == digest))
