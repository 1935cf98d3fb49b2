"""
Notification interface consumed by the write service.
"""

from abc import ABC, abstractmethod


class MailSender(ABC):
    """Fire-and-forget mail notification."""

    @abstractmethod
    async def send_mail(self, subject: str, body: str) -> bool:
        """Send a notification. Returns True if it was delivered."""
        pass
