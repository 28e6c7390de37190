"""anchorcron — staggered rescheduling of security-scanner cron jobs."""

from anchorcron.app import AnchorCron

__all__ = ["AnchorCron"]
