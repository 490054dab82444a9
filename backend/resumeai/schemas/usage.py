"""Plan usage schemas."""

from __future__ import annotations

from marshmallow import Schema, fields


class UsageCounterSchema(Schema):
    class Meta:
        ordered = True

    used = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    remaining = fields.Integer(required=True)


class UsageSchema(Schema):
    """Current month usage of the authenticated user."""

    class Meta:
        ordered = True

    plan = fields.String(required=True)
    period_start = fields.AwareDateTime(required=True)
    resume_uploads = fields.Nested(UsageCounterSchema, required=True)
    analyses = fields.Nested(UsageCounterSchema, required=True)
