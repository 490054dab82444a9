"""User model definition for the resume analyzer."""

from __future__ import annotations

import re
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Index,
    Integer,
    String,
    UniqueConstraint,
    false,
    text,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column, validates

from resumeai.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin, UTCDateTime
from .security import SecurityState
from .usage import (
    DEFAULT_ANALYSES_PER_MONTH,
    DEFAULT_RESUMES_PER_MONTH,
    PLANS,
    UsageState,
)

if TYPE_CHECKING:
    from resumeai.services._shared.ports.password_hasher import PasswordHasher

ROLES: tuple[str, ...] = ("user", "admin", "moderator")
NAME_MAX_LENGTH = 50
EMAIL_MAX_LENGTH = 254

EMAIL_RE = re.compile(r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$")


def _default_hasher() -> PasswordHasher:
    from resumeai.infra.security.password_hasher import WerkzeugPasswordHasher

    return WerkzeugPasswordHasher()


class User(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Account identity with credentials and the security sub-record.

    Fields
    ------
    email : str
        Login email. Stored normalized (lowercase, trimmed).
    password_hash : str
        Salted hash (write-only setter via ``password``). Deferred so that
        ordinary loads never carry it.
    role : str
        One of ``user``, ``admin``, ``moderator``.
    first_name, last_name : str
        Profile names, trimmed, at most 50 characters each.
    is_active : bool
        Soft-disable flag. Accounts are never hard-deleted by auth flows.
    last_login, login_attempts, lock_until : ...
        Login bookkeeping, see :class:`SecurityState`.
    password_reset_token, password_reset_expires : ...
        Digest and expiry of the outstanding reset token.
    email_verification_token, email_verified : ...
        Digest of the outstanding verification token and the verified flag.
    plan : str
        Subscription plan, one of ``free``, ``pro``, ``enterprise``.
    resumes_uploaded, analyses_performed, usage_reset_at : ...
        Monthly counters, see :class:`UsageState`.
    resumes_per_month, analyses_per_month : int
        Monthly allowance of the plan.
    created_at, updated_at : datetime
        Timestamps (from mixin).
    """

    __tablename__ = "users"
    __repr_attrs__ = ("email", "role")

    # Columns
    email: Mapped[str] = mapped_column(String(EMAIL_MAX_LENGTH), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False, deferred=True)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="user", server_default=text("'user'")
    )
    first_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    last_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    # Security sub-record
    last_login: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    login_attempts: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    lock_until: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    password_reset_token: Mapped[str | None] = mapped_column(String(64), nullable=True)
    password_reset_expires: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    email_verification_token: Mapped[str | None] = mapped_column(String(64), nullable=True)
    email_verified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    # Plan usage
    plan: Mapped[str] = mapped_column(
        String(20), nullable=False, default="free", server_default=text("'free'")
    )
    resumes_uploaded: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    analyses_performed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default=text("0")
    )
    usage_reset_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    resumes_per_month: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_RESUMES_PER_MONTH,
        server_default=text(str(DEFAULT_RESUMES_PER_MONTH)),
    )
    analyses_per_month: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=DEFAULT_ANALYSES_PER_MONTH,
        server_default=text(str(DEFAULT_ANALYSES_PER_MONTH)),
    )

    # Constraints & indexes
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint("role IN ('user', 'admin', 'moderator')", name="role_allowed"),
        CheckConstraint("plan IN ('free', 'pro', 'enterprise')", name="plan_allowed"),
        Index("ix_users_password_reset_token", "password_reset_token"),
        Index("ix_users_email_verification_token", "email_verification_token"),
    )

    # -------------------- Password API --------------------
    @property
    def password(self) -> Any:  # pragma: no cover - explicit write-only contract
        """
        Disallow reading passwords.

        :raises AttributeError: Always, to ensure password is write-only.
        """
        raise AttributeError("Password is write-only.")

    @password.setter
    def password(self, raw: str) -> None:
        self.set_password(raw)

    def set_password(self, raw: str, hasher: PasswordHasher | None = None) -> None:
        """
        Hash and set the password.

        :param raw: Plain text password to hash.
        :type raw: str
        :param hasher: Hashing primitive; defaults to the werkzeug adapter.
        :raises ValueError: If ``raw`` is empty or not a string.
        """
        if not isinstance(raw, str) or not raw:
            raise ValueError("Password must be a non-empty string.")
        self.password_hash = (hasher or _default_hasher()).hash(raw)

    def verify_password(self, raw: str, hasher: PasswordHasher | None = None) -> bool:
        """
        Verify a password against the stored hash.

        :param raw: Plain text password candidate.
        :type raw: str
        :returns: ``True`` if it matches; otherwise ``False``.
        :rtype: bool
        """
        if not self.password_hash:
            return False
        return (hasher or _default_hasher()).verify(raw, self.password_hash)

    # -------------------- Security sub-record --------------------
    @property
    def security(self) -> SecurityState:
        """Snapshot of the security columns as an immutable value."""
        return SecurityState(
            last_login=self.last_login,
            login_attempts=self.login_attempts or 0,
            lock_until=self.lock_until,
            password_reset_token=self.password_reset_token,
            password_reset_expires=self.password_reset_expires,
            email_verification_token=self.email_verification_token,
            email_verified=bool(self.email_verified),
        )

    @security.setter
    def security(self, state: SecurityState) -> None:
        self.last_login = state.last_login
        self.login_attempts = state.login_attempts
        self.lock_until = state.lock_until
        self.password_reset_token = state.password_reset_token
        self.password_reset_expires = state.password_reset_expires
        self.email_verification_token = state.email_verification_token
        self.email_verified = state.email_verified

    # -------------------- Plan usage --------------------
    @property
    def usage(self) -> UsageState:
        """Snapshot of the plan counters as an immutable value."""
        return UsageState(
            resumes_uploaded=self.resumes_uploaded or 0,
            analyses_performed=self.analyses_performed or 0,
            reset_at=self.usage_reset_at,
            resumes_per_month=(
                DEFAULT_RESUMES_PER_MONTH
                if self.resumes_per_month is None
                else self.resumes_per_month
            ),
            analyses_per_month=(
                DEFAULT_ANALYSES_PER_MONTH
                if self.analyses_per_month is None
                else self.analyses_per_month
            ),
        )

    @usage.setter
    def usage(self, state: UsageState) -> None:
        self.resumes_uploaded = state.resumes_uploaded
        self.analyses_performed = state.analyses_performed
        self.usage_reset_at = state.reset_at
        self.resumes_per_month = state.resumes_per_month
        self.analyses_per_month = state.analyses_per_month

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    # -------------------- Validators --------------------
    @validates("email")
    def _normalize_email(self, key: str, value: str) -> str:
        """
        Normalize and validate email.

        :param key: Field name (``email``).
        :type key: str
        :param value: Email to normalize.
        :type value: str
        :returns: Normalized email (lowercased/trimmed).
        :rtype: str
        :raises ValueError: If email is missing or malformed.
        """
        if not value or not isinstance(value, str):
            raise ValueError("Email is required.")
        v = value.strip().lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Email format looks invalid.")
        return v

    @validates("first_name", "last_name")
    def _normalize_name(self, key: str, value: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"{key} is required.")
        v = value.strip()
        if len(v) > NAME_MAX_LENGTH:
            raise ValueError(f"{key} cannot exceed {NAME_MAX_LENGTH} characters.")
        return v

    @validates("plan")
    def _validate_plan(self, key: str, value: str) -> str:
        if value not in PLANS:
            raise ValueError(f"plan must be one of {', '.join(PLANS)}.")
        return value

    @validates("role")
    def _validate_role(self, key: str, value: str) -> str:
        if value not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}.")
        return value
