# resumeai/infra/jwt/jwt_token_issuer.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import jwt
from flask import Flask

from resumeai.services._shared.errors import InvalidTokenError, TokenExpiredError
from resumeai.services._shared.ports import TokenClaims, TokenIssuer

if TYPE_CHECKING:
    from resumeai.models.user import User

ACCESS = "access"
REFRESH = "refresh"
REFRESH_TOKEN_LIFETIME = timedelta(days=7)


@dataclass(slots=True)
class JWTTokenIssuer(TokenIssuer):
    """
    HS256 token issuer built on PyJWT.

    Access tokens use the same secret and claim layout that
    Flask-JWT-Extended expects (``sub`` as a string, ``type`` and ``jti``), so
    ``verify_jwt_in_request`` can guard endpoints with them. Refresh tokens are
    signed with a separate secret and are never accepted by that guard.

    .. note::
       Does not need an application context; build it with :meth:`from_app`.
    """

    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = REFRESH_TOKEN_LIFETIME
    algorithm: str = "HS256"
    leeway: timedelta = field(default_factory=timedelta)

    @classmethod
    def from_app(cls, app: Flask) -> JWTTokenIssuer:
        cfg = app.config
        return cls(
            access_secret=cfg["JWT_SECRET_KEY"],
            refresh_secret=cfg["JWT_REFRESH_SECRET_KEY"],
            access_ttl=cfg["JWT_ACCESS_TOKEN_EXPIRES"],
            refresh_ttl=cfg.get("JWT_REFRESH_TOKEN_EXPIRES", REFRESH_TOKEN_LIFETIME),
        )

    # ------------------------------ Issue ------------------------------------

    def _encode(
        self, *, user_id: int, token_type: str, secret: str, ttl: timedelta, extra: dict[str, Any]
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "userId": user_id,
            "type": token_type,
            "jti": uuid4().hex,
            "iat": now,
            "nbf": now,
            "exp": now + ttl,
        }
        payload.update(extra)
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def issue_access_token(self, user: User) -> str:
        return self._encode(
            user_id=user.id,
            token_type=ACCESS,
            secret=self.access_secret,
            ttl=self.access_ttl,
            extra={"email": user.email, "role": user.role},
        )

    def issue_refresh_token(self, user: User) -> str:
        return self._encode(
            user_id=user.id,
            token_type=REFRESH,
            secret=self.refresh_secret,
            ttl=self.refresh_ttl,
            extra={},
        )

    # ------------------------------ Verify -----------------------------------

    def verify(self, token: str, secret: str, *, expected_type: str) -> TokenClaims:
        """Decode ``token`` with ``secret`` and check its ``type`` claim.

        :raises TokenExpiredError: When ``exp`` has passed.
        :raises InvalidTokenError: On any other decoding or claim failure.
        """
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                leeway=self.leeway,
                options={"require": ["exp", "iat", "sub", "type", "jti"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.PyJWTError as exc:
            raise InvalidTokenError() from exc

        if payload.get("type") != expected_type:
            raise InvalidTokenError(f"Expected a {expected_type} token")
        try:
            user_id = int(payload.get("userId", payload["sub"]))
        except (TypeError, ValueError) as exc:
            raise InvalidTokenError("Malformed subject") from exc

        return TokenClaims(
            user_id=user_id,
            token_type=expected_type,
            jti=str(payload["jti"]),
            issued_at=datetime.fromtimestamp(int(payload["iat"]), tz=UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
            email=payload.get("email"),
            role=payload.get("role"),
        )

    def verify_access_token(self, token: str) -> TokenClaims:
        return self.verify(token, self.access_secret, expected_type=ACCESS)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        return self.verify(token, self.refresh_secret, expected_type=REFRESH)
