"""Tests for the SecurityState value object and single-use token helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from resumeai.models.security import SecurityState, digest_token, new_token

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
LOCK = timedelta(minutes=15)


def _fail(state: SecurityState, now: datetime = NOW, *, max_attempts: int = 5) -> SecurityState:
    return state.record_failed_login(now, max_attempts=max_attempts, lock_for=LOCK)


class TestTokens:
    def test_new_token_is_64_hex_chars_and_unique(self):
        a, b = new_token(), new_token()
        assert len(a) == 64
        int(a, 16)
        assert a != b

    def test_digest_is_stable_and_differs_from_token(self):
        token = new_token()
        assert digest_token(token) == digest_token(token)
        assert digest_token(token) != token
        assert len(digest_token(token)) == 64


class TestLockout:
    def test_failures_below_budget_only_count(self):
        state = SecurityState()
        for expected in range(1, 5):
            state = _fail(state)
            assert state.login_attempts == expected
            assert state.lock_until is None
            assert not state.is_locked(NOW)

    def test_fifth_failure_locks_and_resets_counter(self):
        state = SecurityState(login_attempts=4)
        state = _fail(state)
        assert state.login_attempts == 0
        assert state.lock_until == NOW + LOCK
        assert state.is_locked(NOW)
        assert state.is_locked(NOW + LOCK - timedelta(seconds=1))
        assert not state.is_locked(NOW + LOCK)

    def test_expired_lock_restarts_counting(self):
        state = SecurityState(login_attempts=3, lock_until=NOW - timedelta(seconds=1))
        state = _fail(state)
        assert state.login_attempts == 1
        assert state.lock_until is None

    def test_successful_login_clears_counters(self):
        state = SecurityState(login_attempts=3, lock_until=NOW - timedelta(minutes=1))
        state = state.record_login(NOW)
        assert state.last_login == NOW
        assert state.login_attempts == 0
        assert state.lock_until is None

    def test_transitions_do_not_mutate(self):
        state = SecurityState()
        _fail(state)
        assert state.login_attempts == 0
        with pytest.raises(AttributeError):
            state.login_attempts = 3  # type: ignore[misc]


class TestResetAndVerification:
    def test_issue_reset_token_sets_digest_and_expiry(self):
        digest = digest_token("t")
        state = SecurityState().issue_reset_token(digest, NOW + timedelta(hours=1))
        assert state.password_reset_token == digest
        assert state.password_reset_expires == NOW + timedelta(hours=1)

    def test_new_reset_token_replaces_old(self):
        state = SecurityState().issue_reset_token("a" * 64, NOW + timedelta(hours=1))
        state = state.issue_reset_token("b" * 64, NOW + timedelta(hours=2))
        assert state.password_reset_token == "b" * 64
        assert state.password_reset_expires == NOW + timedelta(hours=2)

    def test_consume_clears_token_and_lock(self):
        state = SecurityState(
            login_attempts=2,
            lock_until=NOW + LOCK,
            password_reset_token="a" * 64,
            password_reset_expires=NOW + timedelta(hours=1),
        ).consume_reset_token()
        assert state.password_reset_token is None
        assert state.password_reset_expires is None
        assert state.login_attempts == 0
        assert state.lock_until is None

    def test_mark_email_verified_clears_token(self):
        state = SecurityState().issue_verification_token("c" * 64)
        assert state.email_verification_token == "c" * 64
        state = state.mark_email_verified()
        assert state.email_verified is True
        assert state.email_verification_token is None
