# tests/unit/services/test_usage_service.py
from __future__ import annotations

import pytest

from resumeai.models.usage import UsageKind
from resumeai.services._shared.errors import UsageLimitExceededError, UserNotFoundError


class TestGetUsage:
    def test_new_account_has_full_allowance(self, usage_service, user, freeze_time):
        with freeze_time("2026-03-05 10:00:00"):
            out = usage_service.get_usage(user.id)

        assert out.plan == "free"
        assert (out.resume_uploads.used, out.resume_uploads.remaining) == (0, 3)
        assert (out.analyses.limit, out.analyses.remaining) == (10, 10)
        assert (out.period_start.year, out.period_start.month) == (2026, 3)

    def test_reading_does_not_persist_rollover(self, usage_service, user, freeze_time):
        with freeze_time("2026-03-05 10:00:00"):
            usage_service.get_usage(user.id)
        assert user.usage_reset_at is None

    def test_unknown_or_inactive_user(self, usage_service, user, session):
        with pytest.raises(UserNotFoundError):
            usage_service.get_usage(user.id + 1000)

        user.is_active = False
        session.commit()
        with pytest.raises(UserNotFoundError):
            usage_service.get_usage(user.id)


class TestRecordUsage:
    def test_records_until_limit(self, usage_service, user, freeze_time):
        with freeze_time("2026-03-05 10:00:00"):
            for expected in (1, 2, 3):
                out = usage_service.record_usage(user.id, UsageKind.RESUME_UPLOAD)
                assert out.resume_uploads.used == expected

            with pytest.raises(UsageLimitExceededError) as exc:
                usage_service.record_usage(user.id, UsageKind.RESUME_UPLOAD)

            assert exc.value.kind == "resume_upload"
            assert exc.value.limit == 3
            assert usage_service.get_usage(user.id).analyses.remaining == 10
        assert user.resumes_uploaded == 3

    def test_new_month_resets_counters(self, usage_service, user, freeze_time):
        with freeze_time("2026-03-31 23:00:00"):
            for _ in range(3):
                usage_service.record_usage(user.id, UsageKind.RESUME_UPLOAD)

        with freeze_time("2026-04-01 00:30:00"):
            assert usage_service.get_usage(user.id).resume_uploads.remaining == 3
            out = usage_service.record_usage(user.id, UsageKind.RESUME_UPLOAD)

        assert out.resume_uploads.used == 1
        assert (out.period_start.month, out.period_start.day) == (4, 1)
        assert user.resumes_uploaded == 1

    def test_inactive_user_cannot_record(self, usage_service, user, session):
        user.is_active = False
        session.commit()
        with pytest.raises(UserNotFoundError):
            usage_service.record_usage(user.id, UsageKind.ANALYSIS)
        assert user.analyses_performed == 0
