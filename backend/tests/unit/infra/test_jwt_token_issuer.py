"""Tests for the PyJWT-backed token issuer."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt
import pytest

from resumeai.infra.jwt import JWTTokenIssuer
from resumeai.services._shared.errors import InvalidTokenError, TokenExpiredError

ALICE = SimpleNamespace(id=7, email="alice@example.com", role="user")


@pytest.fixture()
def issuer() -> JWTTokenIssuer:
    return JWTTokenIssuer(access_secret="a" * 32, refresh_secret="r" * 32)


def test_access_token_claims(issuer, freeze_time):
    with freeze_time("2026-01-01 12:00:00"):
        token = issuer.issue_access_token(ALICE)
        claims = issuer.verify_access_token(token)

    assert claims.user_id == 7
    assert claims.token_type == "access"
    assert (claims.email, claims.role) == ("alice@example.com", "user")
    assert claims.issued_at == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)

    payload = jwt.decode(token, "a" * 32, algorithms=["HS256"], options={"verify_exp": False})
    assert payload["sub"] == "7"
    assert payload["userId"] == 7
    assert payload["type"] == "access"


def test_refresh_token_lives_seven_days(issuer):
    claims = issuer.verify_refresh_token(issuer.issue_refresh_token(ALICE))
    assert claims.token_type == "refresh"
    assert claims.expires_at - claims.issued_at == timedelta(days=7)
    assert claims.email is None


def test_each_token_has_unique_jti(issuer):
    first = issuer.verify_refresh_token(issuer.issue_refresh_token(ALICE))
    second = issuer.verify_refresh_token(issuer.issue_refresh_token(ALICE))
    assert first.jti != second.jti


def test_tokens_are_not_interchangeable(issuer):
    with pytest.raises(InvalidTokenError):
        issuer.verify_refresh_token(issuer.issue_access_token(ALICE))
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(issuer.issue_refresh_token(ALICE))


def test_type_claim_is_checked_even_with_matching_secret():
    shared = JWTTokenIssuer(access_secret="s" * 32, refresh_secret="s" * 32)
    with pytest.raises(InvalidTokenError):
        shared.verify_refresh_token(shared.issue_access_token(ALICE))


def test_expired_token(issuer, freeze_time):
    with freeze_time("2026-01-01 12:00:00") as frozen:
        token = issuer.issue_access_token(ALICE)
        frozen.tick(timedelta(minutes=15, seconds=1))
        with pytest.raises(TokenExpiredError):
            issuer.verify_access_token(token)


def test_tampered_and_malformed_tokens(issuer):
    other = JWTTokenIssuer(access_secret="x" * 32, refresh_secret="y" * 32)
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(other.issue_access_token(ALICE))
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token("not.a.jwt")


def test_missing_required_claim(issuer):
    now = datetime.now(UTC)
    token = jwt.encode(
        {"sub": "7", "type": "access", "iat": now, "exp": now + timedelta(minutes=5)},
        "a" * 32,
        algorithm="HS256",
    )
    with pytest.raises(InvalidTokenError):
        issuer.verify_access_token(token)


def test_from_app_reads_config(app):
    issuer = JWTTokenIssuer.from_app(app)
    assert issuer.access_secret == app.config["JWT_SECRET_KEY"]
    assert issuer.refresh_secret == app.config["JWT_REFRESH_SECRET_KEY"]
    assert issuer.refresh_ttl == timedelta(days=7)
