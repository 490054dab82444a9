"""Tests for the in-process denylist and outbox notifier."""

from __future__ import annotations

from datetime import timedelta

from resumeai.services._shared.ports import InMemoryNotifier, InMemoryTokenDenylistStore


class TestInMemoryTokenDenylistStore:
    def test_revocation_expires(self, freeze_time):
        store = InMemoryTokenDenylistStore()
        with freeze_time("2026-01-01 12:00:00") as frozen:
            store.revoke("tok", ttl_seconds=30)
            assert store.is_revoked("tok") is True
            frozen.tick(timedelta(seconds=31))
            assert store.is_revoked("tok") is False

    def test_non_positive_ttl_is_noop(self):
        store = InMemoryTokenDenylistStore()
        store.revoke("tok", ttl_seconds=-5)
        assert store.is_revoked("tok") is False


class TestInMemoryNotifier:
    def test_outbox_records_messages(self):
        notifier = InMemoryNotifier()
        notifier.send_verification("a@example.com", "Ann", "t1")
        notifier.send_welcome("a@example.com", "Ann")
        notifier.send_password_reset("a@example.com", "Ann", "t2")

        assert [m.kind for m in notifier.outbox] == ["verification", "welcome", "password_reset"]
        assert notifier.last().token == "t2"
        assert notifier.last("verification").token == "t1"
        assert notifier.last("welcome").token is None
