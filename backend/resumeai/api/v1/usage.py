"""Monthly plan usage of the authenticated user."""

from __future__ import annotations

from flask import Blueprint

from resumeai.api.deps import (
    current_user_id,
    get_usage_service,
    json_response,
    require_auth,
    timing,
)
from resumeai.core.errors import Unauthorized
from resumeai.models.usage import UsageKind
from resumeai.schemas import UsageSchema
from resumeai.services._shared.errors import UserNotFoundError

bp = Blueprint("usage", __name__, url_prefix="/usage")

usage_schema = UsageSchema()

_KINDS = ", ".join(kind.value for kind in UsageKind)


@bp.get("")
@require_auth
@timing
def get_usage():
    """Counters and remaining allowance for the current month."""

    try:
        out = get_usage_service().get_usage(current_user_id())
    except UserNotFoundError as exc:
        raise Unauthorized("User not found or inactive", code="user_not_found") from exc
    return json_response({"data": usage_schema.dump(out)})


@bp.post(f"/<any({_KINDS}):kind>")
@require_auth
@timing
def record_usage(kind: str):
    """Count one metered action; 403 once the month's allowance is spent."""

    try:
        out = get_usage_service().record_usage(current_user_id(), UsageKind(kind))
    except UserNotFoundError as exc:
        raise Unauthorized("User not found or inactive", code="user_not_found") from exc
    return json_response({"data": usage_schema.dump(out)})
