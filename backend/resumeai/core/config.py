"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"  # development | testing | production

_PLACEHOLDER_SECRETS = frozenset({"CHANGE_ME", "CHANGE_ME_JWT", "CHANGE_ME_JWT_REFRESH"})

load_dotenv()

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def env_bool(name: str, default: bool = False) -> bool:
    """``True`` for 1/true/yes/y/on (any case), ``default`` when unset."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back on errors."""
    raw = (os.getenv(name) or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    JWT_SECRET_KEY: str
        Signing key for **access** tokens. ``flask-jwt-extended`` reads the
        same key to guard protected endpoints.
    JWT_REFRESH_SECRET_KEY: str
        Separate signing key for **refresh** tokens.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime (``JWT_ACCESS_EXPIRES_MINUTES``, default 15).
    JWT_REFRESH_TOKEN_EXPIRES: timedelta
        Refresh token lifetime, fixed at seven days.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    REDIS_URL: str | None
        Redis connection used by the refresh-token denylist. When unset an
        in-process denylist is used instead.
    MAIL_SERVER: str | None
        SMTP host. When unset, emails are logged and kept in memory.
    FRONTEND_URL: str
        Base URL used to build links in transactional emails.
    AUTH_MAX_LOGIN_ATTEMPTS: int
        Failed logins tolerated before the account is locked.
    AUTH_LOCK_MINUTES: int
        Lock window applied once the attempt budget is exhausted.
    AUTH_RESET_TOKEN_TTL_MINUTES: int
        Lifetime of password-reset tokens.
    AUTH_LOGIN_RATE_LIMIT: str
        Flask-Limiter rule applied to the login endpoint.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.

    Notes
    -----
    Values are primarily sourced from environment variables, enabling
    configuration without code changes.
    """

    API_BASE_PREFIX = "/api"
    APP_NAME = os.getenv("APP_NAME", "AI Resume Analyzer")

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "CHANGE_ME_JWT")
    JWT_REFRESH_SECRET_KEY = os.getenv("JWT_REFRESH_SECRET_KEY", "CHANGE_ME_JWT_REFRESH")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("JWT_ACCESS_EXPIRES_MINUTES", 15))
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=7)
    JWT_TOKEN_LOCATION = ["headers"]
    REFRESH_COOKIE_NAME = "refreshToken"
    REFRESH_COOKIE_SECURE = env_bool("REFRESH_COOKIE_SECURE", False)

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Redis (refresh-token denylist)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # Mail
    MAIL_SERVER = os.getenv("MAIL_SERVER") or None
    MAIL_PORT = env_int("MAIL_PORT", 587)
    MAIL_USERNAME = os.getenv("MAIL_USERNAME") or None
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD") or None
    MAIL_USE_TLS = env_bool("MAIL_USE_TLS", True)
    MAIL_USE_SSL = env_bool("MAIL_USE_SSL", False)
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER") or os.getenv("MAIL_USERNAME")
    MAIL_TIMEOUT = env_int("MAIL_TIMEOUT", 12)
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    # Auth policy
    AUTH_MAX_LOGIN_ATTEMPTS = env_int("AUTH_MAX_LOGIN_ATTEMPTS", 5)
    AUTH_LOCK_MINUTES = env_int("AUTH_LOCK_MINUTES", 15)
    AUTH_RESET_TOKEN_TTL_MINUTES = env_int("AUTH_RESET_TOKEN_TTL_MINUTES", 60)
    AUTH_LOGIN_RATE_LIMIT = os.getenv("AUTH_LOGIN_RATE_LIMIT", "5 per minute")
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = env_bool("RATELIMIT_ENABLED", True)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode by default and honors ``SQLALCHEMY_ECHO`` for verbose
    SQL logging when requested.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Never talks to Redis, SMTP or a shared rate-limit store.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    PROPAGATE_EXCEPTIONS = True
    REDIS_URL = None
    MAIL_SERVER = None
    RATELIMIT_ENABLED = False
    JWT_SECRET_KEY = "test-access-secret-with-enough-entropy-0001"
    JWT_REFRESH_SECRET_KEY = "test-refresh-secret-with-enough-entropy-0001"


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled while relying on WSGI-level log
    configuration for noise control. Refresh cookies are always ``Secure``.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False
    REFRESH_COOKIE_SECURE = True


# Map names -> classes (simple, explicit)
CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Returns
    -------
    type[BaseConfig]
        Class to pass to :meth:`flask.Config.from_object`.

    Notes
    -----
    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)


def check_secrets(config: Mapping[str, object]) -> None:
    """Refuse to serve production traffic with placeholder or shared JWT secrets.

    :raises RuntimeError: In non-debug, non-testing mode when ``SECRET_KEY``,
        ``JWT_SECRET_KEY`` or ``JWT_REFRESH_SECRET_KEY`` still hold a
        placeholder, or when access and refresh tokens share a key.
    """
    if config.get("DEBUG") or config.get("TESTING"):
        return
    names = ("SECRET_KEY", "JWT_SECRET_KEY", "JWT_REFRESH_SECRET_KEY")
    weak = [n for n in names if not config.get(n) or config.get(n) in _PLACEHOLDER_SECRETS]
    if weak:
        raise RuntimeError(f"Set real values for: {', '.join(weak)}")
    if config.get("JWT_SECRET_KEY") == config.get("JWT_REFRESH_SECRET_KEY"):
        raise RuntimeError("JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ")
