from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from resumeai.models.user import User


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """
    Verified claims of an access or refresh token.

    :ivar user_id: Owner of the token.
    :ivar token_type: ``"access"`` or ``"refresh"``.
    :ivar jti: Unique token identifier.
    :ivar issued_at: ``iat`` as an aware UTC datetime.
    :ivar expires_at: ``exp`` as an aware UTC datetime.
    :ivar email: Present on access tokens only.
    :ivar role: Present on access tokens only.
    """

    user_id: int
    token_type: str
    jti: str
    issued_at: datetime
    expires_at: datetime
    email: str | None = None
    role: str | None = None


class TokenIssuer(Protocol):
    """Port for issuing and verifying signed session tokens.

    Access and refresh tokens are signed with distinct secrets. Verification
    raises :class:`~resumeai.services._shared.errors.TokenExpiredError` on
    expiry and :class:`~resumeai.services._shared.errors.InvalidTokenError`
    for any other failure, including a token of the wrong type.
    """

    def issue_access_token(self, user: User) -> str: ...
    def issue_refresh_token(self, user: User) -> str: ...
    def verify_access_token(self, token: str) -> TokenClaims: ...
    def verify_refresh_token(self, token: str) -> TokenClaims: ...
