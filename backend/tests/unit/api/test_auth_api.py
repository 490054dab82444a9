"""Integration tests for the authentication endpoints."""

from __future__ import annotations

import pytest

from tests.helpers.assertions import assert_json_keys, assert_problem
from tests.helpers.auth import DEFAULT_PASSWORD, bearer

BASE = "/api/v1/auth"
COOKIE = "refreshToken"


def _register(client, email="bob@example.com", password=DEFAULT_PASSWORD):
    return client.post(
        f"{BASE}/register",
        json={"email": email, "password": password, "first_name": "Bob", "last_name": "Stone"},
    )


def _login(client, email="alice@example.com", password=DEFAULT_PASSWORD):
    return client.post(f"{BASE}/login", json={"email": email, "password": password})


# --------------------------------- Register --------------------------------- #
def test_register_returns_user_access_token_and_cookie(client, app_notifier):
    resp = _register(client)

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert_json_keys(data, {"access_token", "token_type", "user"})
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "bob@example.com"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]
    assert "refresh_token" not in data

    cookie = client.get_cookie(COOKIE)
    assert cookie is not None
    assert cookie.http_only is True
    assert cookie.same_site == "Strict"

    assert [m.kind for m in app_notifier.outbox] == ["verification", "welcome"]


def test_register_duplicate_email(client, user):
    resp = _register(client, "Alice@Example.com")
    assert_problem(resp, 409, "duplicate_email")


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "x@example.com", "password": "weakpass", "first_name": "A", "last_name": "B"},
        {"email": "not-an-email", "password": DEFAULT_PASSWORD, "first_name": "A", "last_name": "B"},
        {"email": "x@example.com", "password": DEFAULT_PASSWORD, "first_name": "", "last_name": "B"},
        {"email": "x@example.com", "password": DEFAULT_PASSWORD},
        {"email": "o'brien@example.com", "password": DEFAULT_PASSWORD, "first_name": "A", "last_name": "B"},
        {"email": "bob@localhost", "password": DEFAULT_PASSWORD, "first_name": "A", "last_name": "B"},
        {"email": "x@example.com", "password": DEFAULT_PASSWORD, "first_name": "   ", "last_name": "B"},
        {"email": "x@example.com", "password": DEFAULT_PASSWORD, "first_name": "A" * 51, "last_name": "B"},
    ],
)
def test_register_validation(client, payload):
    resp = client.post(f"{BASE}/register", json=payload)
    body = assert_problem(resp, 422, "validation_error")
    assert body["details"]["errors"]


def test_register_trims_input_before_validating(client):
    resp = client.post(
        f"{BASE}/register",
        json={
            "email": "  Dana@Example.COM ",
            "password": DEFAULT_PASSWORD,
            "first_name": "  Dana ",
            "last_name": " Reyes",
        },
    )

    assert resp.status_code == 201
    user = resp.get_json()["data"]["user"]
    assert user["email"] == "dana@example.com"
    assert (user["first_name"], user["last_name"]) == ("Dana", "Reyes")


# ---------------------------------- Login ----------------------------------- #
def test_login_success(client, user):
    user_id = user.id
    resp = _login(client)

    assert resp.status_code == 200
    assert resp.get_json()["data"]["user"]["id"] == user_id
    assert client.get_cookie(COOKIE) is not None


def test_login_failures_share_one_message(client, user):
    unknown = assert_problem(_login(client, "nobody@example.com"), 401, "invalid_credentials")
    wrong = assert_problem(_login(client, password="Wrong1!x"), 401, "invalid_credentials")
    assert unknown["detail"] == wrong["detail"] == "Invalid email or password"


def test_login_lockout(client, user):
    for _ in range(5):
        assert _login(client, password="Wrong1!x").status_code == 401

    body = assert_problem(_login(client), 403, "account_locked")
    assert body["detail"] == "Account is temporarily locked. Please try again later."


def test_login_inactive(client, user, session):
    user.is_active = False
    session.commit()
    assert_problem(_login(client), 403, "account_inactive")


# --------------------------------- Refresh ---------------------------------- #
def test_refresh_with_cookie(client, user):
    _login(client)
    resp = client.post(f"{BASE}/refresh")

    assert resp.status_code == 200
    assert_json_keys(resp.get_json()["data"], {"access_token", "token_type"})


def test_refresh_with_body(client, user):
    _login(client)
    token = client.get_cookie(COOKIE).value
    client.delete_cookie(COOKIE)

    resp = client.post(f"{BASE}/refresh", json={"refresh_token": token})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["access_token"]


def test_refresh_without_token(client):
    assert_problem(client.post(f"{BASE}/refresh"), 401, "missing_refresh_token")


def test_refresh_rejects_access_token(client, user):
    access = _login(client).get_json()["data"]["access_token"]
    client.delete_cookie(COOKIE)
    resp = client.post(f"{BASE}/refresh", json={"refresh_token": access})
    assert_problem(resp, 401, "invalid_refresh_token")


# ---------------------------------- Logout ---------------------------------- #
def test_logout_revokes_and_clears_cookie(client, user):
    _login(client)
    token = client.get_cookie(COOKIE).value

    resp = client.post(f"{BASE}/logout")
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Logged out successfully"}
    assert client.get_cookie(COOKIE) is None

    again = client.post(f"{BASE}/refresh", json={"refresh_token": token})
    assert_problem(again, 401, "invalid_refresh_token")


def test_logout_without_token_or_with_garbage(client):
    assert client.post(f"{BASE}/logout").status_code == 200
    assert client.post(f"{BASE}/logout", json={"refresh_token": "garbage"}).status_code == 200


# ------------------------------ Password reset ------------------------------ #
def test_forgot_password_does_not_reveal_accounts(client, user, app_notifier):
    known = client.post(f"{BASE}/forgot-password", json={"email": "alice@example.com"})
    unknown = client.post(f"{BASE}/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.get_json() == unknown.get_json()
    assert [m.email for m in app_notifier.outbox] == ["alice@example.com"]


def test_reset_password_flow(client, user, app_notifier):
    client.post(f"{BASE}/forgot-password", json={"email": "alice@example.com"})
    token = app_notifier.last("password_reset").token

    resp = client.post(
        f"{BASE}/reset-password",
        json={"token": token, "password": "Bb2@bbbb", "confirm_password": "Bb2@bbbb"},
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Password reset successful"}

    assert _login(client, password="Bb2@bbbb").status_code == 200
    reused = client.post(
        f"{BASE}/reset-password",
        json={"token": token, "password": "Cc3!cccc", "confirm_password": "Cc3!cccc"},
    )
    assert_problem(reused, 400, "invalid_or_expired_token")


def test_reset_password_mismatch(client):
    resp = client.post(
        f"{BASE}/reset-password",
        json={"token": "t", "password": "Bb2@bbbb", "confirm_password": "Bb2@bbbc"},
    )
    body = assert_problem(resp, 422, "validation_error")
    assert "confirm_password" in body["details"]["errors"]


# ---------------------------- Email verification ---------------------------- #
def test_verify_email_flow(client, app_notifier):
    _register(client)
    token = app_notifier.last("verification").token

    resp = client.post(f"{BASE}/verify-email", json={"token": token})
    assert resp.status_code == 200
    assert resp.get_json() == {"message": "Email verified successfully"}

    again = client.post(f"{BASE}/verify-email", json={"token": token})
    assert_problem(again, 400, "invalid_verification_token")


# ------------------------------------ Me ------------------------------------ #
def test_me_requires_access_token(client, user):
    user_id = user.id
    access = _login(client).get_json()["data"]["access_token"]

    resp = client.get(f"{BASE}/me", headers=bearer(access))
    assert resp.status_code == 200
    assert resp.get_json()["data"]["id"] == user_id


def test_me_rejections(client, user):
    assert_problem(client.get(f"{BASE}/me"), 401, "missing_token")
    assert_problem(client.get(f"{BASE}/me", headers=bearer("garbage")), 401, "invalid_token")

    _login(client)
    refresh = client.get_cookie(COOKIE).value
    assert_problem(client.get(f"{BASE}/me", headers=bearer(refresh)), 401, "invalid_token")


def test_me_rejects_deactivated_account(client, user, session):
    access = _login(client).get_json()["data"]["access_token"]
    user.is_active = False
    session.commit()

    body = assert_problem(client.get(f"{BASE}/me", headers=bearer(access)), 401, "user_not_found")
    assert body["detail"] == "User not found or inactive"
