"""factory_boy base bound to the per-test transactional session."""

from __future__ import annotations

import factory
from sqlalchemy.orm import Session, scoped_session

_bound: Session | scoped_session | None = None


def bind_session(session: Session | scoped_session | None) -> None:
    """Point every factory at ``session`` (``None`` unbinds)."""
    global _bound
    _bound = session


def current_session() -> Session | scoped_session:
    if _bound is None:
        raise RuntimeError("No session bound for factories; request the 'session' fixture.")
    return _bound


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flush-persisting factory; the surrounding SAVEPOINT discards the rows."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = current_session
        sqlalchemy_session_persistence = "flush"
