"""Outputs of the plan usage use cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class UsageCounterOut:
    used: int
    limit: int
    remaining: int


@dataclass(frozen=True, slots=True)
class UsageOut:
    """
    Usage of the current month.

    :param plan: Subscription plan name.
    :type plan: str
    :param period_start: Instant the current counting period began.
    :type period_start: datetime
    :param resume_uploads: Resume upload counter.
    :type resume_uploads: UsageCounterOut
    :param analyses: Analysis counter.
    :type analyses: UsageCounterOut
    """

    plan: str
    period_start: datetime
    resume_uploads: UsageCounterOut
    analyses: UsageCounterOut
