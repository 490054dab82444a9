"""RFC 7807 problem responses for every failure the auth API can produce.

Each body carries ``type``, ``title``, ``status``, ``detail``, ``instance``,
a stable snake_case ``code`` and the ``request_id`` of the call. Auth failures
take their ``code`` from :class:`AuthErrorKind` and their status from
:data:`AUTH_ERROR_STATUS`.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from marshmallow import ValidationError as MarshmallowValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from resumeai.core.extensions import jwt
from resumeai.core.logger import ensure_request_id
from resumeai.services._shared.errors import (
    AuthError,
    AuthErrorKind,
    ServiceError,
    UsageLimitExceededError,
    ValidationFailedError,
)

log = logging.getLogger(__name__)

PROBLEM_MIMETYPE = "application/problem+json"

AUTH_ERROR_STATUS: dict[AuthErrorKind, HTTPStatus] = {
    AuthErrorKind.DUPLICATE_EMAIL: HTTPStatus.CONFLICT,
    AuthErrorKind.INVALID_CREDENTIALS: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.ACCOUNT_INACTIVE: HTTPStatus.FORBIDDEN,
    AuthErrorKind.ACCOUNT_LOCKED: HTTPStatus.FORBIDDEN,
    AuthErrorKind.INVALID_REFRESH_TOKEN: HTTPStatus.UNAUTHORIZED,
    AuthErrorKind.USER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    AuthErrorKind.INVALID_OR_EXPIRED_TOKEN: HTTPStatus.BAD_REQUEST,
    AuthErrorKind.INVALID_VERIFICATION_TOKEN: HTTPStatus.BAD_REQUEST,
}

_unmapped = set(AuthErrorKind) - set(AUTH_ERROR_STATUS)
if _unmapped:  # pragma: no cover - import-time guard
    raise RuntimeError(f"Auth error kinds without an HTTP status: {sorted(k.name for k in _unmapped)}")

# Codes for framework-raised HTTP errors (404 routes, 405, 429 from the limiter...).
_HTTP_CODES: dict[int, str] = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    413: "payload_too_large",
    415: "unsupported_media_type",
    429: "too_many_requests",
    500: "internal_server_error",
    503: "service_unavailable",
}


def problem(
    status: int,
    code: str,
    detail: str,
    *,
    details: dict[str, Any] | None = None,
) -> tuple[Response, int]:
    """
    Build a ``application/problem+json`` response.

    :param status: HTTP status code.
    :param code: Stable machine-readable identifier.
    :param detail: Client-safe explanation.
    :param details: Optional structured extras, e.g. field errors.
    :returns: ``(response, status)`` ready to return from a handler.
    """
    body: dict[str, Any] = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": int(status),
        "detail": detail,
        "instance": request.path if request else None,
        "code": code,
        "request_id": ensure_request_id(),
    }
    if details:
        body["details"] = details
    response = jsonify(body)
    response.mimetype = PROBLEM_MIMETYPE
    return response, int(status)


class APIError(Exception):
    """
    Failure raised by the HTTP layer itself, outside any service.

    :param message: Client-safe ``detail``.
    :param status_code: HTTP status, ``400`` by default.
    :param code: Machine-readable ``code``.
    """

    def __init__(
        self,
        message: str,
        status_code: int = HTTPStatus.BAD_REQUEST,
        code: str = "bad_request",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.code = code
        self.details = details or {}


class Unauthorized(APIError):
    """401, e.g. refresh requested without any refresh token."""

    def __init__(self, message: str = "Unauthorized", code: str = "unauthorized") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED, code=code)


def auth_error_response(err: AuthError) -> tuple[Response, int]:
    """Render an :class:`AuthError` with the status its kind maps to."""
    return problem(AUTH_ERROR_STATUS[err.kind], err.kind.value, err.message)


def _register_jwt_callbacks() -> None:
    """Flask-JWT-Extended rejections on guarded routes (``/auth/me``)."""

    def _reject(detail: str, code: str) -> tuple[Response, int]:
        log.warning("Access token rejected", extra={"event": "auth.token.rejected", "reason": code})
        return problem(HTTPStatus.UNAUTHORIZED, code, detail)

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _reject("Access denied. No token provided.", "missing_token")

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return _reject("Invalid token", "invalid_token")

    @jwt.expired_token_loader
    def _expired_token(jwt_header: dict[str, Any], jwt_payload: dict[str, Any]):
        return _reject("Token expired", "token_expired")


def init_app(app: Flask) -> None:
    """
    Register the problem handlers.

    4xx outcomes log at WARNING. 5xx outcomes log at ERROR with the traceback
    and never echo internals to the client.
    """
    _register_jwt_callbacks()

    @app.errorhandler(AuthError)
    def handle_auth_error(err: AuthError):
        log.warning("Auth request refused", extra={"event": "auth.error", "reason": err.kind.value})
        return auth_error_response(err)

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        if err.status_code >= 500:
            log.error("API error: %s", err.code)
        else:
            log.warning("API error: %s", err.code, extra={"reason": err.code})
        return problem(err.status_code, err.code, err.message, details=err.details)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        log.warning("Service error: %s", err)
        return problem(HTTPStatus.BAD_REQUEST, "bad_request", str(err))

    @app.errorhandler(ValidationFailedError)
    def handle_model_validation_error(err: ValidationFailedError):
        log.warning("Input rejected by model", extra={"reason": "validation_error"})
        return problem(HTTPStatus.UNPROCESSABLE_ENTITY, "validation_error", err.message)

    @app.errorhandler(UsageLimitExceededError)
    def handle_usage_limit(err: UsageLimitExceededError):
        log.warning("Usage limit reached", extra={"event": "usage.limit", "reason": err.kind})
        return problem(
            HTTPStatus.FORBIDDEN,
            "usage_limit_exceeded",
            err.message,
            details={"kind": err.kind, "limit": err.limit},
        )

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("Request body rejected", extra={"reason": "validation_error"})
        return problem(
            HTTPStatus.UNPROCESSABLE_ENTITY,
            "validation_error",
            "Validation failed",
            details={"errors": err.normalized_messages()},
        )

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        code = _HTTP_CODES.get(status, "error")
        if status == HTTPStatus.NOT_FOUND:
            detail = f"Route '{request.path}' not found"
        else:
            detail = (err.description or HTTPStatus(status).phrase).strip()
        (log.error if status >= 500 else log.warning)("HTTP %s on %s", status, request.path)
        return problem(status, code, detail)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        log.error("Unhandled integrity error", exc_info=True)
        return problem(HTTPStatus.CONFLICT, "conflict", "Resource conflict")

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("Database unavailable", exc_info=True)
        return problem(
            HTTPStatus.SERVICE_UNAVAILABLE, "service_unavailable", "Service temporarily unavailable"
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        log.error("Unhandled exception", exc_info=True)
        return problem(
            HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error", "Unexpected error"
        )
