"""Extension singletons shared by the auth backend.

Created unbound at import time and bound to an app in :func:`init_app`:

* ``db``: users table and units of work.
* ``jwt``: guards ``/auth/me`` with the access-token secret.
* ``limiter``: throttles ``/auth/login`` per client address.
* ``redis_client``: refresh-token denylist, only when ``REDIS_URL`` is set.
"""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Deterministic constraint names keep Alembic autogenerate stable.
metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)
redis_client: redis.Redis | None = None


def init_app(app: Flask) -> None:
    """Bind every extension to ``app``.

    :raises RuntimeError: ``REDIS_URL`` is set but the server does not answer.
    """
    db.init_app(app)
    from resumeai import models as _models  # noqa: F401  (register tables for Alembic)

    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)
    _init_redis(app)


def _init_redis(app: Flask) -> None:
    global redis_client
    url = app.config.get("REDIS_URL")
    if not url:
        redis_client = None
        app.extensions.pop("redis_client", None)
        return
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    redis_client = client
    app.extensions["redis_client"] = client


def get_redis() -> redis.Redis:
    """The bound Redis client.

    :raises RuntimeError: Before :func:`init_app` or without ``REDIS_URL``.
    """
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized. Call init_app() first.")
    return redis_client
