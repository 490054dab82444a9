"""Transaction and clock plumbing shared by application services."""

from __future__ import annotations

from datetime import UTC, datetime

from resumeai.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Services open units of work through these factories instead of touching
    ``db.session``, and read time from :meth:`now` so lockout windows and
    token expiry can be pinned in tests.
    """

    read_isolation: str | None = "READ COMMITTED"

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, isolation: str | None = None) -> SQLAlchemyReadOnlyUnitOfWork:
        """Read-only scope; ``isolation`` overrides :attr:`read_isolation`."""
        return SQLAlchemyReadOnlyUnitOfWork(isolation_level=isolation or self.read_isolation)

    def now(self) -> datetime:
        """Current instant, timezone-aware UTC."""
        return datetime.now(UTC)
