"""
Infrastructure layer module.
"""

from .database import (
    Base,
    get_session,
    init_database,
    close_database,
    OptimisticLockError,
    PostgresFlugzeugRepository,
    QueryBuilder,
)
from .notifications import (
    MailService,
    get_mail_service,
    close_mail_service,
)

__all__ = [
    # Database
    "Base",
    "get_session",
    "init_database",
    "close_database",
    "OptimisticLockError",
    "PostgresFlugzeugRepository",
    "QueryBuilder",
    # Notifications
    "MailService",
    "get_mail_service",
    "close_mail_service",
]
