"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, current_app

from resumeai.api.deps import (
    clear_refresh_cookie,
    current_user_id,
    get_auth_service,
    json_body,
    json_response,
    refresh_token_from,
    require_auth,
    set_refresh_cookie,
    timing,
)
from resumeai.core.errors import Unauthorized
from resumeai.core.extensions import limiter
from resumeai.schemas import (
    AuthResponseSchema,
    ForgotPasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    ResetPasswordSchema,
    TokenResponseSchema,
    UserSchema,
    VerifyEmailSchema,
)
from resumeai.services._shared.errors import UserNotFoundError
from resumeai.services.auth.dto import (
    AuthResultOut,
    ForgotPasswordIn,
    LoginIn,
    LogoutIn,
    RefreshIn,
    RegisterIn,
    ResetPasswordIn,
    VerifyEmailIn,
)

bp = Blueprint("auth", __name__, url_prefix="/auth")

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshSchema()
forgot_password_schema = ForgotPasswordSchema()
reset_password_schema = ResetPasswordSchema()
verify_email_schema = VerifyEmailSchema()
auth_response_schema = AuthResponseSchema()
token_schema = TokenResponseSchema()
user_schema = UserSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


def _session_response(result: AuthResultOut, *, status: int) -> Response:
    """Return user + access token in the body and the refresh token as a cookie."""

    response = json_response({"data": auth_response_schema.dump(result)}, status=status)
    return set_refresh_cookie(response, result.refresh_token)


def _refresh_token_from_request() -> str | None:
    return refresh_token_from(refresh_schema.load(json_body()))


@bp.post("/register")
@timing
def register():
    """Create an account and open a session for it."""

    data = register_schema.load(json_body())
    result = get_auth_service().register(
        RegisterIn(
            email=data["email"],
            password=data["password"],
            first_name=data["first_name"],
            last_name=data["last_name"],
        )
    )
    return _session_response(result, status=201)


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
def login():
    """Authenticate credentials and issue a token pair."""

    data = login_schema.load(json_body())
    result = get_auth_service().login(LoginIn(email=data["email"], password=data["password"]))
    return _session_response(result, status=200)


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token (body or cookie) for a new access token."""

    token = _refresh_token_from_request()
    if not token:
        raise Unauthorized("Refresh token required", code="missing_refresh_token")
    out = get_auth_service().refresh_token(RefreshIn(refresh_token=token))
    return json_response({"data": token_schema.dump(out)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the refresh token, if any, and clear the cookie."""

    token = _refresh_token_from_request()
    if token:
        get_auth_service().logout(LogoutIn(refresh_token=token))
    return clear_refresh_cookie(json_response({"message": "Logged out successfully"}))


@bp.post("/forgot-password")
@timing
def forgot_password():
    """Email a reset link; the answer is the same whether or not the account exists."""

    data = forgot_password_schema.load(json_body())
    get_auth_service().forgot_password(ForgotPasswordIn(email=data["email"]))
    return json_response(
        {"message": "If an account exists for that email, a password reset link has been sent."}
    )


@bp.post("/reset-password")
@timing
def reset_password():
    data = reset_password_schema.load(json_body())
    get_auth_service().reset_password(
        ResetPasswordIn(token=data["token"], new_password=data["password"])
    )
    return json_response({"message": "Password reset successful"})


@bp.post("/verify-email")
@timing
def verify_email():
    data = verify_email_schema.load(json_body())
    get_auth_service().verify_email(VerifyEmailIn(token=data["token"]))
    return json_response({"message": "Email verified successfully"})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    try:
        user = get_auth_service().get_current_user(current_user_id())
    except UserNotFoundError as exc:
        # A valid token for a deleted or deactivated account is an auth failure.
        raise Unauthorized("User not found or inactive", code="user_not_found") from exc
    return json_response({"data": user_schema.dump(user)})
