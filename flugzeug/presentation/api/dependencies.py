"""
API dependencies.

FastAPI dependency injection for services and repositories.
"""

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from flugzeug.application.interfaces import MailSender
from flugzeug.application.services import (
    FlugzeugReadService,
    FlugzeugWriteService,
)
from flugzeug.infrastructure.database import get_session
from flugzeug.infrastructure.database.repositories import PostgresFlugzeugRepository
from flugzeug.infrastructure.notifications import get_mail_service


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_session() as session:
        yield session


def get_mail_sender() -> MailSender:
    """Get mail notification dependency."""
    return get_mail_service()


# Repository dependencies

async def get_flugzeug_repo(
    session: AsyncSession = Depends(get_db_session),
) -> PostgresFlugzeugRepository:
    """Get Flugzeug repository."""
    return PostgresFlugzeugRepository(session)


# Service dependencies

async def get_read_service(
    flugzeug_repo: PostgresFlugzeugRepository = Depends(get_flugzeug_repo),
) -> FlugzeugReadService:
    """Get Flugzeug read service."""
    return FlugzeugReadService(flugzeug_repo)


async def get_write_service(
    flugzeug_repo: PostgresFlugzeugRepository = Depends(get_flugzeug_repo),
    read_service: FlugzeugReadService = Depends(get_read_service),
    mail_sender: MailSender = Depends(get_mail_sender),
) -> FlugzeugWriteService:
    """Get Flugzeug write service."""
    return FlugzeugWriteService(flugzeug_repo, read_service, mail_sender)
