"""Application factory wiring Flask extensions, blueprints and services."""

from __future__ import annotations

import logging

from flask import Flask

from resumeai.core.config import BaseConfig, check_secrets, get_config
from resumeai.core.logger import configure_logging, init_app as init_logging

log = logging.getLogger(__name__)


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)
    check_secrets(app.config)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Proxy headers if running behind a reverse proxy
    from resumeai.core import proxy

    proxy.init_app(app)

    from resumeai.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from resumeai.core import cors

    cors.init_app(app)

    from resumeai.api import init_app as init_api

    init_api(app)

    from resumeai.core import errors

    errors.init_app(app)

    from resumeai import cli as app_cli

    app_cli.init_app(app)

    _init_auth_service(app)

    return app


def _init_auth_service(app: Flask) -> None:
    """Build the single :class:`AuthService` and its adapters for this app,
    plus the :class:`UsageService`.

    Denylist: Redis when ``REDIS_URL`` is configured, otherwise in-process.
    Notifier: SMTP when ``MAIL_SERVER`` is configured, otherwise an in-memory
    outbox that only logs.
    """
    from resumeai.core import extensions
    from resumeai.infra.jwt import JWTTokenIssuer
    from resumeai.infra.mail import SmtpNotifier
    from resumeai.infra.redis import RedisTokenDenylistStore
    from resumeai.infra.security import WerkzeugPasswordHasher
    from resumeai.services._shared.ports import (
        InMemoryNotifier,
        InMemoryTokenDenylistStore,
        Notifier,
        TokenDenylistStore,
    )
    from resumeai.services.auth.dto import AuthPolicy
    from resumeai.services.auth.service import AuthService
    from resumeai.services.usage.service import UsageService

    denylist: TokenDenylistStore
    if extensions.redis_client is not None:
        denylist = RedisTokenDenylistStore(extensions.get_redis())
    else:
        denylist = InMemoryTokenDenylistStore()

    notifier: Notifier
    if app.config.get("MAIL_SERVER"):
        notifier = SmtpNotifier.from_app(app)
    else:
        notifier = InMemoryNotifier()

    app.extensions["auth_service"] = AuthService(
        token_issuer=JWTTokenIssuer.from_app(app),
        denylist_store=denylist,
        notifier=notifier,
        password_hasher=WerkzeugPasswordHasher(),
        policy=AuthPolicy.from_config(app.config),
    )
    app.extensions["usage_service"] = UsageService()
    backends = f"{type(denylist).__name__}/{type(notifier).__name__}"
    log.info("Auth service ready", extra={"event": "app.auth_service", "reason": backends})
