"""Immutable inputs, outputs and policy of the auth use cases."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param email: User email (normalized by the model).
    :type email: str
    :param password: Raw password (hashed before persistence).
    :type password: str
    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    """

    email: str
    password: str
    first_name: str
    last_name: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """Credentials; ``email`` is matched case-insensitively."""

    email: str
    password: str


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """Refresh JWT presented in the body or the ``refreshToken`` cookie."""

    refresh_token: str


@dataclass(frozen=True, slots=True)
class LogoutIn:
    """Refresh JWT to put on the denylist until it expires."""

    refresh_token: str


@dataclass(frozen=True, slots=True)
class ForgotPasswordIn:
    email: str


@dataclass(frozen=True, slots=True)
class ResetPasswordIn:
    """
    Input DTO for completing a password reset.

    :param token: Raw reset token received by email.
    :type token: str
    :param new_password: Replacement password.
    :type new_password: str
    """

    token: str
    new_password: str


@dataclass(frozen=True, slots=True)
class VerifyEmailIn:
    token: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """
    Sanitized user view. Never carries the password hash or security fields.
    """

    id: int
    email: str
    role: str
    first_name: str
    last_name: str
    is_active: bool


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Output DTO of register and login.

    :param user: Sanitized user.
    :type user: UserPublicOut
    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT.
    :type refresh_token: str
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str


@dataclass(frozen=True, slots=True)
class AccessTokenOut:
    access_token: str


# ------------------------------ Policy DTO -------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthPolicy:
    """
    Lockout and single-use token policy.

    :param max_login_attempts: Failed logins tolerated before locking.
    :type max_login_attempts: int
    :param lock_duration: Lock window once the budget is spent.
    :type lock_duration: timedelta
    :param reset_token_ttl: Lifetime of password-reset tokens.
    :type reset_token_ttl: timedelta
    """

    max_login_attempts: int = 5
    lock_duration: timedelta = timedelta(minutes=15)
    reset_token_ttl: timedelta = timedelta(hours=1)

    @classmethod
    def from_config(cls, cfg: Mapping[str, Any]) -> AuthPolicy:
        return cls(
            max_login_attempts=int(cfg.get("AUTH_MAX_LOGIN_ATTEMPTS", 5)),
            lock_duration=timedelta(minutes=int(cfg.get("AUTH_LOCK_MINUTES", 15))),
            reset_token_ttl=timedelta(minutes=int(cfg.get("AUTH_RESET_TOKEN_TTL_MINUTES", 60))),
        )
