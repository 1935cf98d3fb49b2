"""
Application layer interfaces.
"""

from .notification import MailSender
from .repository import FlugzeugRepository, Repository

__all__ = [
    "FlugzeugRepository",
    "MailSender",
    "Repository",
]
