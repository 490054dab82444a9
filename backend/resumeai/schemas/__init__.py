"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    AuthResponseSchema,
    ForgotPasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenResponseSchema,
    VerifyEmailSchema,
)
from .usage import UsageCounterSchema, UsageSchema
from .user import UserSchema

__all__ = [
    "AuthResponseSchema",
    "ForgotPasswordSchema",
    "LoginSchema",
    "RefreshSchema",
    "RegisterSchema",
    "ResetPasswordSchema",
    "TokenResponseSchema",
    "VerifyEmailSchema",
    "UsageCounterSchema",
    "UsageSchema",
    "UserSchema",
]
