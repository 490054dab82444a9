"""Monthly plan allowance of resume uploads and analyses."""

from __future__ import annotations

import logging

from resumeai.models.usage import UsageKind, UsageState
from resumeai.models.user import User
from resumeai.repositories.user import UserRepository
from resumeai.services._shared.base import BaseService
from resumeai.services._shared.errors import UsageLimitExceededError, UserNotFoundError
from resumeai.services.usage.dto import UsageCounterOut, UsageOut

logger = logging.getLogger(__name__)


class UsageService(BaseService):
    """
    Reads and records metered actions against the user's monthly allowance.

    Counters roll over lazily: the first read or write in a new month sees
    them at zero. Reads never persist the rollover; the next recorded action
    does.
    """

    def get_usage(self, user_id: int) -> UsageOut:
        """
        Usage of the current month for an active user.

        :raises UserNotFoundError: Missing or deactivated account.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = self._active(repo.get(user_id))
            return self._to_out(user.plan, user.usage.rolled_over(self.now()))

    def record_usage(self, user_id: int, kind: UsageKind) -> UsageOut:
        """
        Count one ``kind`` action if the allowance has room for it.

        The row is locked so concurrent actions cannot both take the last unit.

        :raises UserNotFoundError: Missing or deactivated account.
        :raises UsageLimitExceededError: The monthly allowance is spent.
        """
        now = self.now()
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users
            user = self._active(repo.get(user_id, for_update=True))
            state = user.usage
            if not state.allows(kind, now):
                logger.info(
                    "Usage limit reached",
                    extra={"event": "usage.denied", "user_id": user.id, "reason": kind.value},
                )
                raise UsageLimitExceededError(kind.value, state.limit(kind))
            user.usage = state.increment(kind, now)
            out = self._to_out(user.plan, user.usage)

        logger.info(
            "Usage recorded",
            extra={"event": "usage.recorded", "user_id": user_id, "reason": kind.value},
        )
        return out

    @staticmethod
    def _active(user: User | None) -> User:
        if user is None or not user.is_active:
            raise UserNotFoundError()
        return user

    @staticmethod
    def _to_out(plan: str, state: UsageState) -> UsageOut:
        def counter(kind: UsageKind) -> UsageCounterOut:
            used, limit = state.used(kind), state.limit(kind)
            return UsageCounterOut(used=used, limit=limit, remaining=max(limit - used, 0))

        assert state.reset_at is not None
        return UsageOut(
            plan=plan,
            period_start=state.reset_at,
            resume_uploads=counter(UsageKind.RESUME_UPLOAD),
            analyses=counter(UsageKind.ANALYSIS),
        )
