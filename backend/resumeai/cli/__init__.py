"""``flask`` sub-commands for operating the auth backend."""

from __future__ import annotations

from flask import Flask

from .users import users_cli


def init_app(app: Flask) -> None:
    """Expose ``flask users ...``."""
    app.cli.add_command(users_cli)
