from __future__ import annotations

from typing import Protocol


class PasswordHasher(Protocol):
    """Port for one-way salted password hashing."""

    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, digest: str) -> bool: ...
