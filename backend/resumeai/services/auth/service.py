# resumeai/services/auth/service.py
from __future__ import annotations

import logging
from collections.abc import Callable

from sqlalchemy.exc import IntegrityError

from resumeai.models.security import digest_token, new_token
from resumeai.models.user import User
from resumeai.repositories.user import UserRepository
from resumeai.services._shared.base import BaseService
from resumeai.services._shared.errors import (
    AccountInactiveError,
    AccountLockedError,
    AuthError,
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    InvalidRefreshTokenError,
    InvalidVerificationTokenError,
    TokenError,
    UserNotFoundError,
    ValidationFailedError,
    violates,
)
from resumeai.services._shared.ports import (
    Notifier,
    PasswordHasher,
    TokenDenylistStore,
    TokenIssuer,
)
from resumeai.services.auth.dto import (
    AccessTokenOut,
    AuthPolicy,
    AuthResultOut,
    ForgotPasswordIn,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    ResetPasswordIn,
    UserPublicOut,
    VerifyEmailIn,
)

logger = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Authentication and session lifecycle service.

    Operations: register, login, refresh_token, logout, forgot_password,
    reset_password and verify_email. Collaborators are injected once at
    process start; the service keeps no state between calls.

    Every read-modify-write runs in a single read-write Unit of Work. Emails
    are sent only after commit and a delivery failure never fails the
    operation.
    """

    def __init__(
        self,
        *,
        token_issuer: TokenIssuer,
        denylist_store: TokenDenylistStore,
        notifier: Notifier,
        password_hasher: PasswordHasher,
        policy: AuthPolicy | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param token_issuer: Signs and verifies access/refresh tokens.
        :param denylist_store: Revoked refresh tokens with per-entry TTL.
        :param notifier: Transactional email sender.
        :param password_hasher: One-way password hashing primitive.
        :param policy: Lockout and reset-token policy.
        """
        super().__init__()
        self.tokens = token_issuer
        self.denylist = denylist_store
        self.notifier = notifier
        self.hasher = password_hasher
        self.policy = policy or AuthPolicy()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create an account and open a session for it.

        :param dto: Registration input.
        :returns: Sanitized user with a fresh token pair.
        :raises DuplicateEmailError: If the email is already registered.
        :raises ValidationFailedError: If the model rejects a field.
        """
        email = dto.email.strip().lower()
        verification_token = new_token()
        try:
            with self.rw_uow() as uow:
                repo: UserRepository = uow.users
                if repo.exists_by_email(email):
                    raise DuplicateEmailError()

                try:
                    user = User(
                        email=email,
                        first_name=dto.first_name,
                        last_name=dto.last_name,
                        role="user",
                        is_active=True,
                    )
                    user.set_password(dto.password, hasher=self.hasher)
                except ValueError as exc:
                    raise ValidationFailedError(str(exc)) from exc
                user.security = user.security.issue_verification_token(
                    digest_token(verification_token)
                )
                repo.add(user)
                result = self._session_for(user)
        except IntegrityError as exc:
            # Lost a race against a concurrent registration.
            if violates(exc, "uq_users_email"):
                raise DuplicateEmailError() from exc
            raise

        logger.info("User registered", extra={"event": "auth.register", "user_id": result.user.id})
        name = result.user.first_name
        self._notify("verification", self.notifier.send_verification, email, name, verification_token)
        self._notify("welcome", self.notifier.send_welcome, email, name)
        return result

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        A wrong password counts against the lockout budget; the counter is
        committed before :class:`InvalidCredentialsError` is raised.

        :param dto: Login input.
        :returns: Sanitized user with a fresh token pair.
        :raises InvalidCredentialsError: Unknown email or wrong password.
        :raises AccountLockedError: While ``lock_until`` is in the future.
        :raises AccountInactiveError: If the account is disabled.
        """
        now = self.now()
        failure: AuthError | None = None
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email, with_password=True, for_update=True)
            if user is None:
                raise InvalidCredentialsError()

            state = user.security
            if state.is_locked(now):
                raise AccountLockedError()

            if not user.verify_password(dto.password, hasher=self.hasher):
                user.security = state.record_failed_login(
                    now,
                    max_attempts=self.policy.max_login_attempts,
                    lock_for=self.policy.lock_duration,
                )
                failure = InvalidCredentialsError()
                user_id = user.id
            elif not user.is_active:
                raise AccountInactiveError()
            else:
                user.security = state.record_login(now)
                result = self._session_for(user)

        if failure is not None:
            logger.info(
                "Login failed",
                extra={"event": "auth.login.failed", "user_id": user_id, "reason": "password"},
            )
            raise failure

        logger.info("User logged in", extra={"event": "auth.login", "user_id": result.user.id})
        return result

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh_token(self, dto: RefreshIn) -> AccessTokenOut:
        """
        Exchange a valid refresh token for a new access token.

        The refresh token itself is not rotated.

        :raises InvalidRefreshTokenError: Expired, malformed or revoked token.
        :raises UserNotFoundError: The token's owner no longer exists.
        """
        try:
            claims = self.tokens.verify_refresh_token(dto.refresh_token)
        except TokenError as exc:
            raise InvalidRefreshTokenError() from exc

        if self.denylist.is_revoked(dto.refresh_token):
            raise InvalidRefreshTokenError()

        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(claims.user_id)
            if user is None:
                raise UserNotFoundError()
            access = self.tokens.issue_access_token(user)

        return AccessTokenOut(access_token=access)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, dto: LogoutIn) -> None:
        """
        Revoke a refresh token for the rest of its lifetime.

        Never fails on an invalid or expired token; repeated calls are no-ops.
        Denylist outages propagate.
        """
        try:
            claims = self.tokens.verify_refresh_token(dto.refresh_token)
        except TokenError:
            logger.debug("Logout with unverifiable token ignored", extra={"event": "auth.logout"})
            return

        ttl = int((claims.expires_at - self.now()).total_seconds())
        if ttl > 0:
            self.denylist.revoke(dto.refresh_token, ttl_seconds=ttl)
        logger.info("User logged out", extra={"event": "auth.logout", "user_id": claims.user_id})

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def forgot_password(self, dto: ForgotPasswordIn) -> None:
        """
        Issue a password-reset token and email it.

        Unknown emails return silently so callers cannot probe for accounts.
        A new request replaces any outstanding token.
        """
        now = self.now()
        reset_token = new_token()
        recipient: tuple[str, str] | None = None
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_email(dto.email)
            if user is not None:
                user.security = user.security.issue_reset_token(
                    digest_token(reset_token), now + self.policy.reset_token_ttl
                )
                recipient = (user.email, user.first_name)
                user_id = user.id

        if recipient is None:
            logger.info(
                "Password reset requested for unknown email",
                extra={"event": "auth.forgot_password", "reason": "unknown_email"},
            )
            return

        logger.info(
            "Password reset requested", extra={"event": "auth.forgot_password", "user_id": user_id}
        )
        self._notify("password_reset", self.notifier.send_password_reset, *recipient, reset_token)

    def reset_password(self, dto: ResetPasswordIn) -> None:
        """
        Set a new password using an unexpired reset token.

        Consuming the token also lifts any lockout.

        :raises InvalidOrExpiredTokenError: No user holds the token, or it expired.
        """
        now = self.now()
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_reset_token(digest_token(dto.token), now=now)
            if user is None:
                raise InvalidOrExpiredTokenError()
            user.set_password(dto.new_password, hasher=self.hasher)
            user.security = user.security.consume_reset_token()
            user_id = user.id

        logger.info("Password reset", extra={"event": "auth.reset_password", "user_id": user_id})

    # ------------------------------------------------------------------ #
    # Email verification
    # ------------------------------------------------------------------ #

    def verify_email(self, dto: VerifyEmailIn) -> None:
        """
        Mark the address holding ``dto.token`` as verified.

        :raises InvalidVerificationTokenError: No user holds the token.
        """
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get_by_verification_token(digest_token(dto.token))
            if user is None:
                raise InvalidVerificationTokenError()
            user.security = user.security.mark_email_verified()
            user_id = user.id

        logger.info("Email verified", extra={"event": "auth.verify_email", "user_id": user_id})

    # ------------------------------------------------------------------ #
    # Current user
    # ------------------------------------------------------------------ #

    def get_current_user(self, user_id: int) -> UserPublicOut:
        """
        Return the sanitized profile behind an access token.

        :raises UserNotFoundError: Missing or deactivated account.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.get(user_id)
            if user is None or not user.is_active:
                raise UserNotFoundError()
            return self.to_public(user)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def to_public(user: User) -> UserPublicOut:
        return UserPublicOut(
            id=user.id,
            email=user.email,
            role=user.role,
            first_name=user.first_name,
            last_name=user.last_name,
            is_active=user.is_active,
        )

    def _session_for(self, user: User) -> AuthResultOut:
        return AuthResultOut(
            user=self.to_public(user),
            access_token=self.tokens.issue_access_token(user),
            refresh_token=self.tokens.issue_refresh_token(user),
        )

    def _notify(self, kind: str, send: Callable[..., None], *args: str) -> None:
        """Deliver an email without letting a delivery failure escape."""
        try:
            send(*args)
        except Exception:
            logger.warning(
                "Failed to send %s email",
                kind,
                exc_info=True,
                extra={"event": f"auth.mail_failed.{kind}"},
            )
