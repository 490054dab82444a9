"""Service layer public API.

This package exposes the essential building blocks for the service layer so that
callers can import from :mod:`resumeai.services` without knowing internal structure.

Re-exports
----------
- Base primitive (from ``resumeai.services._shared.base``)
    * :class:`BaseService`

- Auth service (from ``resumeai.services.auth``)
    * :class:`AuthService`
    * DTOs: :class:`RegisterIn`, :class:`LoginIn`, :class:`RefreshIn`,
      :class:`LogoutIn`, :class:`ForgotPasswordIn`, :class:`ResetPasswordIn`,
      :class:`VerifyEmailIn`, :class:`UserPublicOut`, :class:`AuthResultOut`,
      :class:`AccessTokenOut`, :class:`AuthPolicy`

- Usage service (from ``resumeai.services.usage``)
    * :class:`UsageService`
    * DTOs: :class:`UsageOut`, :class:`UsageCounterOut`
"""

from __future__ import annotations

from ._shared.base import BaseService
from .auth.dto import (
    AccessTokenOut,
    AuthPolicy,
    AuthResultOut,
    ForgotPasswordIn,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    ResetPasswordIn,
    UserPublicOut,
    VerifyEmailIn,
)
from .auth.service import AuthService
from .usage.dto import UsageCounterOut, UsageOut
from .usage.service import UsageService

__all__ = [
    "BaseService",
    "AuthService",
    "RegisterIn",
    "LoginIn",
    "RefreshIn",
    "LogoutIn",
    "ForgotPasswordIn",
    "ResetPasswordIn",
    "VerifyEmailIn",
    "UserPublicOut",
    "AuthResultOut",
    "AccessTokenOut",
    "AuthPolicy",
    "UsageService",
    "UsageOut",
    "UsageCounterOut",
]
