"""Integration tests for the plan usage endpoints."""

from __future__ import annotations

from tests.helpers.assertions import assert_json_keys, assert_problem
from tests.helpers.auth import DEFAULT_PASSWORD, bearer

BASE = "/api/v1/usage"


def _access_token(client, email="alice@example.com"):
    resp = client.post("/api/v1/auth/login", json={"email": email, "password": DEFAULT_PASSWORD})
    return resp.get_json()["data"]["access_token"]


def test_usage_requires_access_token(client):
    assert_problem(client.get(BASE), 401, "missing_token")
    assert_problem(client.post(f"{BASE}/analysis"), 401, "missing_token")


def test_get_usage(client, user):
    resp = client.get(BASE, headers=bearer(_access_token(client)))

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert_json_keys(data, {"plan", "period_start", "resume_uploads", "analyses"})
    assert data["plan"] == "free"
    assert data["resume_uploads"] == {"used": 0, "limit": 3, "remaining": 3}


def test_record_usage_until_limit(client, user):
    headers = bearer(_access_token(client))
    for used in (1, 2, 3):
        resp = client.post(f"{BASE}/resume_upload", headers=headers)
        assert resp.status_code == 200
        assert resp.get_json()["data"]["resume_uploads"]["used"] == used

    over = client.post(f"{BASE}/resume_upload", headers=headers)
    body = assert_problem(over, 403, "usage_limit_exceeded")
    assert body["details"] == {"kind": "resume_upload", "limit": 3}

    analyses = client.post(f"{BASE}/analysis", headers=headers).get_json()["data"]["analyses"]
    assert analyses["used"] == 1


def test_unknown_kind_is_not_found(client, user):
    resp = client.post(f"{BASE}/cover_letter", headers=bearer(_access_token(client)))
    assert_problem(resp, 404, "not_found")


def test_deactivated_account_is_rejected(client, user, session):
    headers = bearer(_access_token(client))
    user.is_active = False
    session.commit()

    assert_problem(client.get(BASE, headers=headers), 401, "user_not_found")
    assert_problem(client.post(f"{BASE}/analysis", headers=headers), 401, "user_not_found")
