"""
resumeai.services._shared.ports
===============================

Collection of *ports* (hexagonal interfaces) consumed by the auth service.

Modules
-------
- :mod:`token_issuer`:
    Defines :class:`~.TokenIssuer` and :class:`~.TokenClaims`: signing and
    verification of access/refresh tokens.

- :mod:`denylist_store`:
    Defines :class:`~.TokenDenylistStore`: revocation of refresh tokens with
    per-entry expiry.

- :mod:`notifier`:
    Defines :class:`~.Notifier`: verification, password-reset and welcome
    emails.

- :mod:`password_hasher`:
    Defines :class:`~.PasswordHasher`: one-way salted hashing.

Design Notes
------------
All these ports follow the *Dependency Inversion Principle (DIP)* to keep
the service layer independent from implementation details. Concrete adapters
(Redis, SMTP, PyJWT, werkzeug) live under ``resumeai.infra``; the in-memory
variants kept here back development setups and unit tests.
"""

from __future__ import annotations

from .denylist_store import InMemoryTokenDenylistStore, TokenDenylistStore
from .notifier import InMemoryNotifier, Notifier, SentMessage
from .password_hasher import PasswordHasher
from .token_issuer import TokenClaims, TokenIssuer

__all__ = [
    "TokenIssuer",
    "TokenClaims",
    "TokenDenylistStore",
    "InMemoryTokenDenylistStore",
    "Notifier",
    "InMemoryNotifier",
    "SentMessage",
    "PasswordHasher",
]
