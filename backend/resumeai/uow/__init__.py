"""Units of work used by the auth services.

``SQLAlchemyUnitOfWork`` wraps state-changing flows (register, login
bookkeeping, reset, verification). ``SQLAlchemyReadOnlyUnitOfWork`` wraps
lookups that must never write (refresh, current user).
"""

from .base import UnitOfWork
from .sqlalchemy_uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork

__all__ = [
    "UnitOfWork",
    "SQLAlchemyUnitOfWork",
    "SQLAlchemyReadOnlyUnitOfWork",
]
