"""Version 1 of the auth API."""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .health import bp as health_bp
from .usage import bp as usage_bp

API_VERSION = "v1"

# (blueprint, prefix relative to /api/v1)
ROUTES: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, "/auth"),
    (usage_bp, "/usage"),
]
