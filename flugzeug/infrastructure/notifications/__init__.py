"""Notification services."""

from .mail_service import (
    MailService,
    get_mail_service,
    close_mail_service,
)

__all__ = [
    "MailService",
    "get_mail_service",
    "close_mail_service",
]
