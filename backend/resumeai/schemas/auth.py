"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

import re
from typing import Any

from marshmallow import Schema, ValidationError, fields, pre_load, validate, validates_schema

from resumeai.models.user import EMAIL_MAX_LENGTH, EMAIL_RE, NAME_MAX_LENGTH

from .user import UserSchema

# At least one lower, one upper, one digit and one special character.
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,128}$")
PASSWORD_MESSAGE = (
    "Password must contain at least one lowercase letter, one uppercase letter, "
    "one number, and one special character (@$!%*?&)."
)


def _password_field(**kwargs: Any) -> fields.String:
    return fields.String(
        required=True,
        load_only=True,
        validate=[
            validate.Length(min=8, max=128),
            validate.Regexp(PASSWORD_RE, error=PASSWORD_MESSAGE),
        ],
        **kwargs,
    )


def _name_field() -> fields.String:
    return fields.String(required=True, validate=validate.Length(min=1, max=NAME_MAX_LENGTH))


class RegisterSchema(Schema):
    """Input payload for account registration.

    Email and names are trimmed (email also lower-cased) before validation so
    the rules checked here are exactly the ones the ``User`` model enforces.
    """

    email = fields.Email(
        required=True,
        validate=[
            validate.Length(max=EMAIL_MAX_LENGTH),
            validate.Regexp(EMAIL_RE, error="Please provide a valid email address."),
        ],
    )
    password = _password_field()
    first_name = _name_field()
    last_name = _name_field()

    @pre_load
    def _normalize(self, data: Any, **_: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("email", "first_name", "last_name"):
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
        if isinstance(data.get("email"), str):
            data["email"] = data["email"].lower()
        return data


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Refresh and logout payload; the cookie is used when the body omits the token."""

    refresh_token = fields.String(load_default=None, allow_none=True)


class ForgotPasswordSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=254))


class ResetPasswordSchema(Schema):
    """Input payload for completing a password reset."""

    token = fields.String(required=True, validate=validate.Length(min=1, max=128))
    password = _password_field()
    confirm_password = fields.String(required=True, load_only=True)

    @validates_schema
    def _passwords_match(self, data: dict[str, Any], **_: Any) -> None:
        if data.get("password") != data.get("confirm_password"):
            raise ValidationError("Passwords do not match.", field_name="confirm_password")


class VerifyEmailSchema(Schema):
    token = fields.String(required=True, validate=validate.Length(min=1, max=128))


class TokenResponseSchema(Schema):
    """Response payload containing an access token."""

    access_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")


class AuthResponseSchema(TokenResponseSchema):
    """Response payload of register and login."""

    user = fields.Nested(UserSchema, required=True)
