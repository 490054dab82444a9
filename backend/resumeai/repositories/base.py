"""Shared persistence helpers for SQLAlchemy 2.x repositories.

Repositories only read and stage rows. Transactions belong to the unit of
work that handed them their session, so nothing here commits or rolls back.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from resumeai.core.extensions import db

E = TypeVar("E")


class BaseRepository(Generic[E]):
    """
    Persistence-only access to one mapped class.

    Subclasses set ``model`` and add their own lookups on top of :meth:`_first`.
    """

    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        """The unit of work's session, or the Flask-scoped one."""
        return self._session if self._session is not None else cast(Session, db.session)

    def _first(self, stmt: Select[Any], *, for_update: bool = False) -> E | None:
        if for_update:
            # SQLite ignores FOR UPDATE; PostgreSQL serializes writers on the row.
            stmt = stmt.with_for_update()
        return cast(E | None, self.session.execute(stmt).scalars().first())

    # ---------------------------------------------------------------- writes

    def add(self, instance: E) -> E:
        """
        Stage ``instance`` and flush so its primary key is assigned.

        Unique violations surface here as :class:`sqlalchemy.exc.IntegrityError`.
        """
        self.session.add(instance)
        self.session.flush()
        return instance

    # ----------------------------------------------------------------- reads

    def get(self, entity_id: Any, *, for_update: bool = False) -> E | None:
        """Look up by primary key, optionally locking the row."""
        stmt = select(self.model).where(self.model.id == entity_id)  # type: ignore[attr-defined]
        return self._first(stmt, for_update=for_update)

