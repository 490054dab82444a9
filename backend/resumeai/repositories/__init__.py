"""Repository package exposing persistence-layer access for domain models."""

from __future__ import annotations

from resumeai.repositories.base import BaseRepository
from resumeai.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
]
