from .smtp_notifier import SmtpNotifier

__all__ = ["SmtpNotifier"]
