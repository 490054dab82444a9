from .service import UsageService

__all__ = ["UsageService"]
