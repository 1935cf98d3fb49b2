"""
Mail notification service.

Sends short HTML notifications about new Flugzeuge to the configured
recipients via SMTP.
"""

from email.message import EmailMessage
from typing import Optional

import aiosmtplib
import structlog

from flugzeug.application.interfaces.notification import MailSender
from flugzeug.config.settings import MailSettings, get_settings

logger = structlog.get_logger(__name__)


class MailService(MailSender):
    """
    Service for sending notification mails.

    Every mail opens its own SMTP connection. Delivery problems are
    logged and reported as ``False``; they are never raised to the caller.
    """

    def __init__(self, settings: Optional[MailSettings] = None):
        self._settings = settings or get_settings().mail

    def _build_message(self, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self._settings.sender
        message["To"] = ", ".join(self._settings.recipients)
        message.set_content(body, subtype="html")
        return message

    async def _deliver(self, message: EmailMessage) -> None:
        settings = self._settings
        username = password = None
        if settings.username and settings.password:
            username = settings.username
            password = settings.password.get_secret_value()
        await aiosmtplib.send(
            message,
            hostname=settings.host,
            port=settings.port,
            username=username,
            password=password,
            start_tls=settings.use_tls,
            timeout=settings.timeout,
        )

    async def send_mail(self, subject: str, body: str) -> bool:
        """
        Send a notification mail.

        Args:
            subject: Mail subject
            body: HTML body

        Returns:
            True if the SMTP server accepted the mail
        """
        if not self._settings.enabled:
            logger.debug("Mail disabled, skipping", subject=subject)
            return False

        if not self._settings.recipients:
            logger.warning("No recipients configured for mail")
            return False

        message = self._build_message(subject, body)

        try:
            await self._deliver(message)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning(
                "Failed to send mail",
                subject=subject,
                host=self._settings.host,
                error=str(e),
            )
            return False

        logger.info(
            "Mail sent",
            subject=subject,
            recipients=len(self._settings.recipients),
        )
        return True

    async def close(self) -> None:
        """Nothing to release; connections are opened per mail."""


# Singleton instance
_mail_service: Optional[MailService] = None


def get_mail_service() -> MailService:
    """Get or create mail service singleton."""
    global _mail_service

    if _mail_service is None:
        _mail_service = MailService()

    return _mail_service


async def close_mail_service() -> None:
    """Close the mail service."""
    global _mail_service

    if _mail_service is not None:
        await _mail_service.close()
        _mail_service = None
