"""JSON logging for the auth backend, correlated by request id.

Auth events are logged with ``extra={"event": ..., "user_id": ..., "reason": ...}``.
Anything credential-shaped that ends up in ``extra`` is masked before it
reaches the handler.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from flask import Flask, g, has_request_context, request

REQUEST_ID_HEADER = "X-Request-ID"
CORRELATION_HEADERS = ("X-Request-ID", "X-Correlation-ID")

EXTRA_KEYS = ("event", "user_id", "reason", "endpoint", "elapsed_ms")
SENSITIVE_KEYS = frozenset(
    {"password", "token", "refresh_token", "access_token", "reset_token", "authorization"}
)
REDACTED = "***"

# Inbound ids are echoed into logs and headers, so only short printable ones are trusted.
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with auth context keys when set."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        for key in SENSITIVE_KEYS:
            if hasattr(record, key):
                payload[key] = REDACTED
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = ensure_request_id() if has_request_context() else None
        return True


def ensure_request_id() -> str:
    """
    Current request id, adopted from ``X-Request-ID``/``X-Correlation-ID``
    when the caller sent a safe one, otherwise generated once per request.

    Outside a request every call returns a fresh UUID.
    """
    if not has_request_context():
        return str(uuid4())
    existing = g.get("request_id")
    if existing:
        return existing
    incoming = next(
        (
            value
            for value in (request.headers.get(h) for h in CORRELATION_HEADERS)
            if value and _SAFE_REQUEST_ID.match(value)
        ),
        None,
    )
    g.request_id = incoming or str(uuid4())
    return g.request_id


def configure_logging(level: str | int = "INFO") -> None:
    """Send JSON records to stdout from the root logger at ``level``."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    handler.addFilter(RequestIdFilter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def init_app(app: Flask) -> None:
    """Seed the request id early and echo it on every response."""
    app.logger.addFilter(RequestIdFilter())

    @app.before_request
    def _seed_request_id() -> None:
        # ``g`` outlives a request when an app context is already pushed.
        g.pop("request_id", None)
        ensure_request_id()

    @app.after_request
    def _echo_request_id(response):
        response.headers.setdefault(REQUEST_ID_HEADER, ensure_request_id())
        return response


__all__ = ["configure_logging", "init_app", "ensure_request_id", "JSONFormatter"]
