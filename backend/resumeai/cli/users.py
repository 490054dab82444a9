"""Flask CLI commands for managing user accounts."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from resumeai.core.extensions import db
from resumeai.models.security import SecurityState
from resumeai.models.user import User
from resumeai.repositories.user import UserRepository

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Collection of user account commands."""


@users_cli.command("create-admin")
@click.argument("email")
@click.option("--first-name", default="Admin", show_default=True)
@click.option("--last-name", default="User", show_default=True)
@click.option("--password", default=None, help="Required when the account does not exist yet.")
@with_appcontext
def create_admin_command(email: str, first_name: str, last_name: str, password: str | None) -> None:
    """Create an admin account, or promote an existing one."""
    service = current_app.extensions["auth_service"]
    repo = UserRepository(session=db.session)
    user = repo.get_by_email(email)
    created = user is None
    try:
        if user is None:
            if not password:
                password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
            user = User(email=email, first_name=first_name, last_name=last_name)
            user.set_password(password, hasher=service.hasher)
            repo.add(user)
        user.role = "admin"
        user.is_active = True
        user.security = SecurityState(
            last_login=user.last_login,
            email_verified=True,
        )
        db.session.commit()
    except ValueError as exc:
        db.session.rollback()
        raise click.BadParameter(str(exc)) from exc

    LOGGER.info("Admin account ready", extra={"event": "cli.create_admin", "user_id": user.id})
    click.echo(f"{'Created' if created else 'Promoted'} admin {user.email} (id={user.id})")
