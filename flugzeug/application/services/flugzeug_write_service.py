"""
Flugzeug write service.

Handles creation, version-checked updates and cascading deletion
of Flugzeuge.
"""

import re
from typing import Optional

import structlog

from flugzeug.application.interfaces.notification import MailSender
from flugzeug.application.interfaces.repository import FlugzeugRepository
from flugzeug.domain.entities import Flugzeug
from flugzeug.domain.exceptions import (
    FlugzeugNotFoundError,
    VersionInvalidError,
    VersionOutdatedError,
)

from .flugzeug_read_service import FlugzeugReadService

logger = structlog.get_logger(__name__)


class FlugzeugWriteService:
    """
    Service for writing Flugzeuge.

    Update implements optimistic concurrency: the caller sends the
    version it read (as an ETag-like token, e.g. ``"3"``), which must not
    be older than the stored version.
    """

    VERSION_PATTERN = re.compile(r'"(\d{1,3})"')

    def __init__(
        self,
        flugzeug_repo: FlugzeugRepository,
        read_service: FlugzeugReadService,
        mail_service: MailSender,
    ):
        self.flugzeug_repo = flugzeug_repo
        self.read_service = read_service
        self.mail_service = mail_service

    async def create(self, flugzeug: Flugzeug) -> int:
        """
        Create a Flugzeug together with its Modell and Sitzplaetze.

        Args:
            flugzeug: New Flugzeug graph without IDs

        Returns:
            Generated Flugzeug ID
        """
        logger.debug("create", flugzeug=str(flugzeug))

        saved = await self.flugzeug_repo.save(flugzeug)

        logger.info(
            "Flugzeug created",
            flugzeug_id=saved.id,
            modell=str(saved.modell),
            sitzplaetze=len(saved.sitzplaetze),
        )

        await self._send_mail(saved)

        return saved.id

    async def update(
        self,
        flugzeug_id: Optional[int],
        flugzeug: Flugzeug,
        version: str,
    ) -> int:
        """
        Update the scalar fields of an existing Flugzeug.

        Args:
            flugzeug_id: ID of the Flugzeug to update
            flugzeug: Patch; fields left as None keep their stored value
            version: Version token, e.g. '"0"'

        Returns:
            New version assigned by the storage layer

        Raises:
            FlugzeugNotFoundError: If the ID is missing or unknown
            VersionInvalidError: If the token is malformed
            VersionOutdatedError: If the token is older than the stored version
        """
        logger.debug(
            "update",
            flugzeug_id=flugzeug_id,
            flugzeug=str(flugzeug),
            version=version,
        )
        if flugzeug_id is None:
            logger.debug("update: no valid ID")
            raise FlugzeugNotFoundError(flugzeug_id)

        current = await self._validate_update(flugzeug_id, version)

        current.merge(flugzeug)
        current.touch()
        updated = await self.flugzeug_repo.save(current)

        logger.info(
            "Flugzeug updated",
            flugzeug_id=flugzeug_id,
            version=updated.version,
        )
        return updated.version

    async def delete(self, flugzeug_id: int) -> bool:
        """
        Delete a Flugzeug with its Modell and Sitzplaetze.

        Args:
            flugzeug_id: Flugzeug ID

        Returns:
            True if the Flugzeug existed and was deleted
        """
        logger.debug("delete", flugzeug_id=flugzeug_id)

        flugzeug = await self.flugzeug_repo.find_by_id(
            flugzeug_id,
            mit_sitzplaetze=True,
        )
        if flugzeug is None:
            logger.debug("delete: Flugzeug not found", flugzeug_id=flugzeug_id)
            return False

        deleted = await self.flugzeug_repo.delete_aggregate(flugzeug)

        logger.info("Flugzeug deleted", flugzeug_id=flugzeug_id, deleted=deleted)
        return deleted

    async def _validate_update(self, flugzeug_id: int, version: str) -> Flugzeug:
        """Check the version token against the stored Flugzeug."""
        match = self.VERSION_PATTERN.fullmatch(version) if isinstance(version, str) else None
        if match is None:
            raise VersionInvalidError(version)

        token_version = int(match.group(1))
        logger.debug("_validate_update", flugzeug_id=flugzeug_id, version=token_version)

        current = await self.read_service.find_by_id(flugzeug_id)

        # A token newer than the stored version is accepted.
        if token_version < current.version:
            logger.debug(
                "_validate_update: outdated",
                version=token_version,
                version_db=current.version,
            )
            raise VersionOutdatedError(token_version)

        return current

    async def _send_mail(self, flugzeug: Flugzeug) -> None:
        """Notify about a new Flugzeug. Failures never undo the create."""
        subject = f"Neues Flugzeug {flugzeug.id}"
        modell = flugzeug.modell.modell if flugzeug.modell else "N/A"
        body = f"Das Flugzeug mit dem Modell <strong>{modell}</strong> ist angelegt"

        try:
            await self.mail_service.send_mail(subject, body)
        except Exception as e:
            logger.warning(
                "Failed to send notification",
                flugzeug_id=flugzeug.id,
                error=str(e),
            )
