from resumeai.models.security import SecurityState
from resumeai.models.usage import UsageKind, UsageState
from resumeai.models.user import User

__all__ = [
    "SecurityState",
    "UsageKind",
    "UsageState",
    "User",
]
