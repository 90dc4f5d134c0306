"""Outbound notifications for generated summaries and reports."""

import logging

from app.config import get_settings
from app.db.models import User

logger = logging.getLogger(__name__)
settings = get_settings()


class Notifier:
    """
    Best-effort notifier.

    Delivery is logged rather than mailed. Callers never see a failure:
    notify() logs and swallows anything raised while delivering.
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    @staticmethod
    def address_of(user: User) -> str:
        """Recipient address for a user. Read it before any rollback can expire the row."""
        return user.email or str(user.id)

    def deliver(self, recipient: str, subject: str, text: str) -> None:
        """Send one message. Override to plug in a real transport."""
        logger.info("Notification to %s: %s", recipient, subject)
        logger.debug("Notification body for %s:\n%s", recipient, text)

    def notify(self, recipient: str, subject: str, text: str) -> None:
        if not self.enabled:
            return
        try:
            self.deliver(recipient, subject, text)
        except Exception:
            logger.exception("Failed to notify %s (%s)", recipient, subject)

    def weekly_summary_ready(self, recipient: str, summary_text: str) -> None:
        self.notify(recipient, "Your weekly summary is ready", summary_text)

    def monthly_report_ready(self, recipient: str, report_text: str) -> None:
        self.notify(recipient, "Your monthly report is ready", report_text)

    def welcome(self, recipient: str, name: str) -> None:
        self.notify(recipient, f"Welcome, {name}", "Your standup journal is ready.")


notifier = Notifier(enabled=settings.notifications_enabled)
