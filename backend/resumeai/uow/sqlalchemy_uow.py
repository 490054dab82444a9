"""Units of work over the Flask-SQLAlchemy scoped session.

Both flavours bind a :class:`UserRepository` to ``db.session`` so the account
row read at the start of a flow is the same object written at the end of it.
"""

from __future__ import annotations

import logging
from contextlib import suppress

from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from resumeai.core.extensions import db
from resumeai.repositories import UserRepository
from resumeai.uow.base import UnitOfWork

logger = logging.getLogger(__name__)

# Leading SQL keywords that mutate data or schema.
_MUTATING_KEYWORDS = frozenset(
    {
        "insert",
        "update",
        "delete",
        "merge",
        "upsert",
        "replace",
        "create",
        "alter",
        "drop",
        "truncate",
        "grant",
        "revoke",
    }
)

_ISOLATION_LEVELS = frozenset(
    {"READ UNCOMMITTED", "READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"}
)


def _leading_keyword(statement: str | None) -> str:
    if not statement:
        return ""
    head = statement.lstrip().split(None, 1)
    return head[0].lower() if head else ""


class _SessionBound:
    """Repositories sharing one session."""

    def __init__(self, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=session)


class SQLAlchemyUnitOfWork(_SessionBound, UnitOfWork):
    """
    Read-write scope for flows that change an account.

    Commits when the block exits cleanly, rolls back otherwise. A failed
    commit (for example a duplicate email racing past the existence check)
    is rolled back before the error propagates.
    """

    def __init__(self) -> None:
        super().__init__(db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_SessionBound, UnitOfWork):
    """
    Scope for lookups that must leave accounts untouched.

    Used by refresh and current-user resolution. On entry it tries to open its
    own transaction; when one is already running on the session (autobegin,
    test fixtures) it joins that one instead.

    Protections, strongest first:

    * ``SET TRANSACTION READ ONLY`` and the requested isolation level, only
      when this scope owns the transaction and the dialect understands them
      (PostgreSQL, MySQL/MariaDB).
    * a ``before_flush`` hook rejecting pending ORM changes.
    * a ``before_cursor_execute`` hook rejecting mutating SQL.

    The hooks are removed on exit, and an owned transaction is always rolled
    back. :meth:`commit` is refused.

    :param isolation_level: e.g. ``"READ COMMITTED"``; ``None`` keeps the
        connection default.
    :param enforce_db_readonly: Issue ``SET TRANSACTION READ ONLY`` when
        supported.
    """

    def __init__(
        self,
        *,
        isolation_level: str | None = "READ COMMITTED",
        enforce_db_readonly: bool = True,
    ) -> None:
        super().__init__(db.session)
        self.isolation_level = isolation_level
        self.enforce_db_readonly = enforce_db_readonly
        self._owned: SessionTransaction | None = None
        self._conn: Connection | None = None
        self._guarded = False

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        try:
            owned = self.session.begin()
            owned.__enter__()
            self._owned = owned
        except InvalidRequestError:
            self._owned = None

        self._conn = self.session.connection()
        self._attach_guards()
        if self._owned is not None:
            self._apply_transaction_settings(self._conn.dialect.name)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if self._owned is not None:
                with suppress(SQLAlchemyError):
                    self.session.rollback()
                try:
                    self._owned.__exit__(exc_type, exc, tb)
                finally:
                    self._owned = None
        finally:
            self._detach_guards()
            self._conn = None

    def commit(self) -> None:
        """:raises RuntimeError: always."""
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    # -- settings ----------------------------------------------------------------

    def _apply_transaction_settings(self, dialect: str) -> None:
        if dialect == "sqlite":
            return
        try:
            if self.isolation_level:
                level = self.isolation_level.strip().upper()
                if level not in _ISOLATION_LEVELS:
                    logger.warning("Unrecognised isolation level %r, sending as-is", level)
                self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
            if self.enforce_db_readonly and dialect in ("postgresql", "mysql", "mariadb"):
                self.session.execute(text("SET TRANSACTION READ ONLY"))
        except SQLAlchemyError as exc:
            logger.warning("SET TRANSACTION rejected (%s); relying on write guards", exc)

    # -- guards ------------------------------------------------------------------

    def _refuse_flush(self, session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")

    def _refuse_mutation(self, conn, cursor, statement, parameters, context, executemany) -> None:
        keyword = _leading_keyword(statement)
        if keyword in _MUTATING_KEYWORDS:
            raise RuntimeError(f"Read-only UnitOfWork: SQL statement blocked: {keyword.upper()}")

    def _guard_target(self):
        return self._conn if self._conn is not None else self.session.get_bind()

    def _attach_guards(self) -> None:
        if self._guarded:
            return
        event.listen(self.session, "before_flush", self._refuse_flush)
        event.listen(self._guard_target(), "before_cursor_execute", self._refuse_mutation)
        self._guarded = True

    def _detach_guards(self) -> None:
        if not self._guarded:
            return
        with suppress(InvalidRequestError):
            event.remove(self.session, "before_flush", self._refuse_flush)
        with suppress(InvalidRequestError):
            event.remove(self._guard_target(), "before_cursor_execute", self._refuse_mutation)
        self._guarded = False
