"""Request plumbing shared by the auth and health routes."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from resumeai.core.errors import Unauthorized
from resumeai.services.auth.service import AuthService
from resumeai.services.usage.service import UsageService

F = TypeVar("F", bound=Callable[..., Any])


def get_auth_service() -> AuthService:
    return cast(AuthService, current_app.extensions["auth_service"])


def get_usage_service() -> UsageService:
    return cast(UsageService, current_app.extensions["usage_service"])


# -- access token ----------------------------------------------------------------


def require_auth(func: F) -> F:
    """Reject the request unless it carries a valid bearer access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request()
        return func(*args, **kwargs)

    return cast(F, wrapper)


def current_user_id() -> int:
    """
    User id from the verified access token's ``sub`` claim.

    :raises Unauthorized: If the subject is not a numeric user id.
    """
    try:
        return int(get_jwt_identity())
    except (TypeError, ValueError) as exc:
        raise Unauthorized("Invalid access token", code="invalid_token") from exc


# -- refresh cookie --------------------------------------------------------------


def refresh_cookie_name() -> str:
    return str(current_app.config.get("REFRESH_COOKIE_NAME", "refreshToken"))


def set_refresh_cookie(response: Response, token: str) -> Response:
    """Attach ``token`` as an httpOnly, SameSite=Strict cookie living as long as the token."""
    lifetime = current_app.config["JWT_REFRESH_TOKEN_EXPIRES"]
    response.set_cookie(
        refresh_cookie_name(),
        token,
        max_age=int(lifetime.total_seconds()),
        httponly=True,
        secure=bool(current_app.config.get("REFRESH_COOKIE_SECURE", False)),
        samesite="Strict",
    )
    return response


def clear_refresh_cookie(response: Response) -> Response:
    response.delete_cookie(refresh_cookie_name(), httponly=True, samesite="Strict")
    return response


def refresh_token_from(body: dict[str, Any]) -> str | None:
    """The refresh token from the parsed body, falling back to the cookie."""
    return body.get("refresh_token") or request.cookies.get(refresh_cookie_name())


# -- JSON ------------------------------------------------------------------------


def json_body() -> dict[str, Any]:
    """Request JSON object, or ``{}`` when the body is missing or not an object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def json_response(payload: Any, *, status: int = 200) -> Response:
    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Log handler latency at DEBUG as ``request.elapsed``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            current_app.logger.debug(
                "request.elapsed",
                extra={
                    "endpoint": request.endpoint,
                    "elapsed_ms": round((time.perf_counter() - start) * 1000, 2),
                },
            )

    return cast(F, wrapper)
