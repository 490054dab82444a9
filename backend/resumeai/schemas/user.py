"""User resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UserSchema(Schema):
    """Public representation of a user entity."""

    class Meta:
        ordered = True

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    role = fields.String(required=True)
    first_name = fields.String(required=True)
    last_name = fields.String(required=True)
    is_active = fields.Boolean(required=True)
