"""Transaction boundary contract the auth services program against."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resumeai.repositories import UserRepository


class UnitOfWork(ABC):
    """
    One auth use case, one transaction.

    A unit of work hands out the ``users`` repository bound to its session.
    Leaving the ``with`` block normally makes the account changes durable;
    leaving it through an exception discards them.
    """

    users: UserRepository

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...

    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...

    @abstractmethod
    def commit(self) -> None:
        """Make pending account changes durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard pending account changes."""
