"""HTTP surface: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def _join(*segments: str) -> str:
    return "/" + "/".join(s.strip("/") for s in segments if s.strip("/"))


def mount(app: Flask, prefix: str, routes: Iterable[tuple[Blueprint, str]]) -> None:
    """Register each ``(blueprint, relative_prefix)`` pair under ``prefix``."""
    for blueprint, relative in routes:
        app.register_blueprint(blueprint, url_prefix=_join(prefix, relative))


def init_app(app: Flask) -> None:
    """
    Mount API v1.

    With the default prefix the auth routes live under ``/api/v1/auth`` and the
    health probe at ``/api/v1/health``.
    """
    from resumeai.api import v1

    mount(app, _join(app.config.get("API_BASE_PREFIX", "/api"), v1.API_VERSION), v1.ROUTES)


__all__ = ["init_app", "mount"]
