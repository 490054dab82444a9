from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from resumeai.services._shared.ports import PasswordHasher


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """Salted password hashing through :mod:`werkzeug.security`.

    :ivar method: Werkzeug method string, e.g. ``"scrypt"`` or ``"pbkdf2:sha256"``.
    """

    method: str = "scrypt"

    def hash(self, plain: str) -> str:
        return generate_password_hash(plain, method=self.method)

    def verify(self, plain: str, digest: str) -> bool:
        # ``check_password_hash`` is untyped; coerce to bool for mypy.
        return bool(check_password_hash(digest, plain))
