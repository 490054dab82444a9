"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask or HTTP. They serve as stable contracts between repositories, domain
models, and application services.

Authentication failures form a closed set: every :class:`AuthError` carries an
:class:`AuthErrorKind`, and the HTTP layer (``resumeai/core/errors.py``) owns a
total mapping from kind to status code.
"""

from __future__ import annotations

from enum import Enum

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message. SQLite only
    reports the offending columns (``UNIQUE constraint failed: users.email``),
    so the ``uq_<table>_<column>`` convention is also matched on that form.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        The name of the database constraint to match (e.g., 'uq_users_email').

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return f"{table}.{column}" in message
    return False


# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - They can be safely raised from repositories or domain logic.
    - The application error handler translates them to problem responses.
    """

    pass


# --------------------------------------------------------------------------- #
# Token issuer errors
# --------------------------------------------------------------------------- #


class TokenError(ServiceError):
    """Base class for token verification failures."""


class InvalidTokenError(TokenError):
    """Bad signature, malformed payload or unexpected token type."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message)


class TokenExpiredError(TokenError):
    """The token was well-formed and signed but its ``exp`` has passed."""

    def __init__(self, message: str = "Token expired") -> None:
        super().__init__(message)


# --------------------------------------------------------------------------- #
# Authentication errors (closed set)
# --------------------------------------------------------------------------- #


class AuthErrorKind(Enum):
    """Every failure the auth core can report to its caller."""

    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_INACTIVE = "account_inactive"
    ACCOUNT_LOCKED = "account_locked"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    USER_NOT_FOUND = "user_not_found"
    INVALID_OR_EXPIRED_TOKEN = "invalid_or_expired_token"
    INVALID_VERIFICATION_TOKEN = "invalid_verification_token"


class AuthError(ServiceError):
    """
    Base class for typed authentication failures.

    Subclasses pin ``kind`` and a default client-safe message.

    :ivar kind: Discriminant used by the HTTP layer.
    :ivar message: Human-readable summary.
    """

    kind: AuthErrorKind
    default_message: str = "Authentication failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmailError(AuthError):
    kind = AuthErrorKind.DUPLICATE_EMAIL
    default_message = "User already exists with this email"


class InvalidCredentialsError(AuthError):
    # Same message for unknown email and wrong password.
    kind = AuthErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid email or password"


class AccountInactiveError(AuthError):
    kind = AuthErrorKind.ACCOUNT_INACTIVE
    default_message = "Account is deactivated"


class AccountLockedError(AuthError):
    kind = AuthErrorKind.ACCOUNT_LOCKED
    default_message = "Account is temporarily locked. Please try again later."


class InvalidRefreshTokenError(AuthError):
    kind = AuthErrorKind.INVALID_REFRESH_TOKEN
    default_message = "Invalid refresh token"


class UserNotFoundError(AuthError):
    kind = AuthErrorKind.USER_NOT_FOUND
    default_message = "User not found"


class InvalidOrExpiredTokenError(AuthError):
    kind = AuthErrorKind.INVALID_OR_EXPIRED_TOKEN
    default_message = "Invalid or expired reset token"


class InvalidVerificationTokenError(AuthError):
    kind = AuthErrorKind.INVALID_VERIFICATION_TOKEN
    default_message = "Invalid verification token"


AUTH_ERRORS: dict[AuthErrorKind, type[AuthError]] = {
    cls.kind: cls
    for cls in (
        DuplicateEmailError,
        InvalidCredentialsError,
        AccountInactiveError,
        AccountLockedError,
        InvalidRefreshTokenError,
        UserNotFoundError,
        InvalidOrExpiredTokenError,
        InvalidVerificationTokenError,
    )
}


# --------------------------------------------------------------------------- #
# Input and quota errors
# --------------------------------------------------------------------------- #


class ValidationFailedError(ServiceError):
    """
    Input the domain model refused after it passed request validation.

    :ivar message: Client-safe reason, taken from the model's ``ValueError``.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UsageLimitExceededError(ServiceError):
    """
    The user's plan allows no more of this action in the current month.

    :ivar kind: The metered action (``"resume_upload"`` or ``"analysis"``).
    :ivar limit: Monthly allowance that was reached.
    """

    def __init__(self, kind: str, limit: int) -> None:
        self.kind = kind
        self.limit = limit
        self.message = f"Monthly {kind.replace('_', ' ')} limit of {limit} reached"
        super().__init__(self.message)
