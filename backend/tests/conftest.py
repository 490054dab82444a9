"""Shared fixtures: one app per run, one SAVEPOINT per test, in-memory auth adapters."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from resumeai.core.config import TestingConfig
from resumeai.core.extensions import db as _db
from resumeai.factory import create_app
from resumeai.infra.jwt import JWTTokenIssuer
from resumeai.services._shared.ports import InMemoryNotifier, InMemoryTokenDenylistStore
from resumeai.services.auth.dto import AuthPolicy
from resumeai.services.auth.service import AuthService
from resumeai.services.usage.service import UsageService
from tests.helpers.auth import FAST_HASHER


class TestConfig(TestingConfig):
    """In-memory SQLite, no Redis, no SMTP, no login throttling."""

    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = None
    MAIL_SERVER = None
    RATELIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"


@pytest.fixture(scope="session")
def app():
    # A developer .env must not point tests at real backends.
    os.environ.pop("DATABASE_URL", None)
    os.environ.pop("REDIS_URL", None)
    app = create_app(TestConfig)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create the ``users`` table once and keep an app context open for the run."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Single connection; the in-memory database lives as long as it does."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Scoped session installed as ``db.session`` for one test.

    An outer transaction is opened on the shared connection and a SAVEPOINT
    inside it; whenever a unit of work commits or rolls back, a fresh
    SAVEPOINT is started. Everything is discarded with the outer
    transaction at teardown.
    """
    top_trans = connection.begin()

    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    nested = connection.begin_nested()

    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2026-01-01 12:00:00"):
    ...         ...
    """
    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2026-01-01 12:00:00")

    return _factory


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import bind_session

    bind_session(session)
    yield
    bind_session(None)


# -- Auth collaborators ---------------------------------------------------------
@pytest.fixture()
def notifier() -> InMemoryNotifier:
    return InMemoryNotifier()


@pytest.fixture()
def denylist() -> InMemoryTokenDenylistStore:
    return InMemoryTokenDenylistStore()


@pytest.fixture()
def token_issuer() -> JWTTokenIssuer:
    return JWTTokenIssuer(
        access_secret=TestConfig.JWT_SECRET_KEY,
        refresh_secret=TestConfig.JWT_REFRESH_SECRET_KEY,
    )


@pytest.fixture()
def auth_service(app, token_issuer, denylist, notifier) -> AuthService:
    """Build an AuthService wired to in-memory doubles.

    .. note::
       Runs inside the session-wide application context held by ``db``.
    """
    return AuthService(
        token_issuer=token_issuer,
        denylist_store=denylist,
        notifier=notifier,
        password_hasher=FAST_HASHER,
        policy=AuthPolicy(),
    )


@pytest.fixture()
def usage_service(app) -> UsageService:
    return UsageService()


@pytest.fixture()
def user(session):
    """Persist and commit an active user with :data:`DEFAULT_PASSWORD`.

    Committing moves the row below the SAVEPOINT that units of work roll back
    to, so the user survives service calls that fail.
    """
    from tests.factories.user import UserFactory

    obj = UserFactory(email="alice@example.com", first_name="Alice", last_name="Liddell")
    session.commit()
    return obj


# -- HTTP ----------------------------------------------------------------------
@pytest.fixture()
def client(app, session):
    """Return a Flask test client sharing the transactional session."""
    return app.test_client()


@pytest.fixture()
def app_notifier(app) -> InMemoryNotifier:
    """The outbox notifier wired into the application's auth service."""
    service = app.extensions["auth_service"]
    outbox = service.notifier
    assert isinstance(outbox, InMemoryNotifier)
    outbox.outbox.clear()
    return outbox
