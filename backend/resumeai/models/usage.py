"""Monthly usage allowance of a user account as an immutable value object.

Counters belong to a calendar month (UTC). Any read or write against a
snapshot whose ``reset_at`` falls in an earlier month first rolls the
counters back to zero, so a new month always starts with a full allowance::

    user.usage = user.usage.increment(UsageKind.ANALYSIS, now)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

PLANS: tuple[str, ...] = ("free", "pro", "enterprise")
DEFAULT_RESUMES_PER_MONTH = 3
DEFAULT_ANALYSES_PER_MONTH = 10


class UsageKind(str, Enum):
    """Metered actions."""

    RESUME_UPLOAD = "resume_upload"
    ANALYSIS = "analysis"


@dataclass(frozen=True, slots=True)
class UsageState:
    """Snapshot of the plan counters.

    Attributes
    ----------
    resumes_uploaded, analyses_performed : int
        Actions recorded since ``reset_at``.
    reset_at : datetime | None
        Start of the counting period; ``None`` until the first rollover.
    resumes_per_month, analyses_per_month : int
        Monthly allowance of each action.
    """

    resumes_uploaded: int = 0
    analyses_performed: int = 0
    reset_at: datetime | None = None
    resumes_per_month: int = DEFAULT_RESUMES_PER_MONTH
    analyses_per_month: int = DEFAULT_ANALYSES_PER_MONTH

    # -------------------- Queries --------------------
    def used(self, kind: UsageKind) -> int:
        if kind is UsageKind.RESUME_UPLOAD:
            return self.resumes_uploaded
        return self.analyses_performed

    def limit(self, kind: UsageKind) -> int:
        if kind is UsageKind.RESUME_UPLOAD:
            return self.resumes_per_month
        return self.analyses_per_month

    def remaining(self, kind: UsageKind, now: datetime) -> int:
        state = self.rolled_over(now)
        return max(state.limit(kind) - state.used(kind), 0)

    def allows(self, kind: UsageKind, now: datetime) -> bool:
        """Return ``True`` if one more ``kind`` fits in the month of ``now``."""
        return self.remaining(kind, now) > 0

    # -------------------- Transitions --------------------
    def rolled_over(self, now: datetime) -> UsageState:
        """Counters for the month of ``now``: unchanged within the same month."""
        if self.reset_at is not None and (self.reset_at.year, self.reset_at.month) == (
            now.year,
            now.month,
        ):
            return self
        return replace(self, resumes_uploaded=0, analyses_performed=0, reset_at=now)

    def increment(self, kind: UsageKind, now: datetime) -> UsageState:
        state = self.rolled_over(now)
        if kind is UsageKind.RESUME_UPLOAD:
            return replace(state, resumes_uploaded=state.resumes_uploaded + 1)
        return replace(state, analyses_performed=state.analyses_performed + 1)
