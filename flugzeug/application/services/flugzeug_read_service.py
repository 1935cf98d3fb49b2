"""
Flugzeug read service.

Finds single Flugzeuge by ID and collections by search criteria.
"""

import re
from typing import Any, Mapping, Optional

import structlog

from flugzeug.application.interfaces.repository import FlugzeugRepository
from flugzeug.domain.entities import Flugzeug
from flugzeug.domain.exceptions import (
    FlugzeugNotFoundError,
    InvalidSearchCriteriaError,
)

logger = structlog.get_logger(__name__)


class FlugzeugReadService:
    """
    Service for reading Flugzeuge.

    Handles:
    - Lookup by ID, optionally with Sitzplaetze
    - Search by criteria with an allow-list of field names
    """

    ID_PATTERN = re.compile(r"^[1-9]\d{0,9}$")
    MAX_ID = 2_147_483_647

    @classmethod
    def parse_id(cls, value: str) -> Optional[int]:
        """Parse an ID; None unless it is a positive 32-bit integer."""
        if cls.ID_PATTERN.match(value) is None:
            return None
        flugzeug_id = int(value)
        return flugzeug_id if flugzeug_id <= cls.MAX_ID else None

    def __init__(self, flugzeug_repo: FlugzeugRepository):
        self.flugzeug_repo = flugzeug_repo

    async def find_by_id(
        self,
        flugzeug_id: int,
        mit_sitzplaetze: bool = False,
    ) -> Flugzeug:
        """
        Find a Flugzeug by its ID.

        Args:
            flugzeug_id: Flugzeug ID
            mit_sitzplaetze: Also load the Sitzplaetze

        Returns:
            Flugzeug with its Modell

        Raises:
            FlugzeugNotFoundError: If there is no Flugzeug with this ID
        """
        logger.debug("find_by_id", flugzeug_id=flugzeug_id, mit_sitzplaetze=mit_sitzplaetze)

        flugzeug = await self.flugzeug_repo.find_by_id(
            flugzeug_id,
            mit_sitzplaetze=mit_sitzplaetze,
        )
        if flugzeug is None:
            raise FlugzeugNotFoundError(flugzeug_id)

        logger.debug(
            "find_by_id: found",
            flugzeug=str(flugzeug),
            modell=str(flugzeug.modell),
            sitzplaetze=len(flugzeug.sitzplaetze) if mit_sitzplaetze else None,
        )
        return flugzeug

    async def find(
        self,
        suchkriterien: Optional[Mapping[str, Any]] = None,
    ) -> list[Flugzeug]:
        """
        Find Flugzeuge by search criteria.

        Without criteria all Flugzeuge are returned. With criteria the
        result is never empty: no match is reported as an error.

        Args:
            suchkriterien: Field name to value, e.g. {"modell": "a"}

        Returns:
            Matching Flugzeuge

        Raises:
            InvalidSearchCriteriaError: If a key is not a Flugzeug property
            FlugzeugNotFoundError: If nothing matches
        """
        logger.debug("find", suchkriterien=suchkriterien)

        if not suchkriterien:
            return await self.flugzeug_repo.find({})

        invalid = [key for key in suchkriterien if not Flugzeug.is_search_key(key)]
        if invalid:
            logger.debug("find: invalid search keys", keys=invalid)
            raise InvalidSearchCriteriaError(invalid, suchkriterien)

        flugzeuge = await self.flugzeug_repo.find(suchkriterien)
        if not flugzeuge:
            logger.debug("find: no Flugzeuge found")
            raise FlugzeugNotFoundError(suchkriterien=suchkriterien)

        return flugzeuge
