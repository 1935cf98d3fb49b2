"""
Flugzeug repository implementation.

Handles persistence for the Flugzeug aggregate: the Flugzeug row,
its Modell and its Sitzplaetze.
"""

from typing import Any, Mapping, Optional

import structlog
from sqlalchemy import delete

from flugzeug.application.interfaces.repository import FlugzeugRepository
from flugzeug.config import get_settings
from flugzeug.domain.entities import Flugzeug
from flugzeug.infrastructure.database.mappers import (
    flugzeug_entity_to_model,
    flugzeug_model_to_entity,
)
from flugzeug.infrastructure.database.models import (
    FlugzeugModel,
    ModellModel,
    SitzplatzModel,
)
from flugzeug.infrastructure.database.query_builder import QueryBuilder

from .base import BaseRepository

logger = structlog.get_logger(__name__)


class PostgresFlugzeugRepository(
    BaseRepository[FlugzeugModel, Flugzeug],
    FlugzeugRepository,
):
    """PostgreSQL implementation of FlugzeugRepository."""

    model_class = FlugzeugModel

    def __init__(self, session, query_builder: Optional[QueryBuilder] = None):
        super().__init__(session)
        self.query_builder = query_builder or QueryBuilder(
            get_settings().database.dialect
        )

    def _to_entity(self, model: FlugzeugModel) -> Flugzeug:
        return flugzeug_model_to_entity(model)

    def _to_model(
        self,
        entity: Flugzeug,
        model: Optional[FlugzeugModel] = None,
    ) -> FlugzeugModel:
        return flugzeug_entity_to_model(entity, model)

    async def find_by_id(
        self,
        flugzeug_id: int,
        mit_sitzplaetze: bool = False,
    ) -> Optional[Flugzeug]:
        """Get a Flugzeug with its Modell, optionally with Sitzplaetze."""
        stmt = self.query_builder.build_id(flugzeug_id, mit_sitzplaetze)
        result = await self.session.execute(stmt)
        model = result.unique().scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def find(
        self,
        suchkriterien: Optional[Mapping[str, Any]] = None,
    ) -> list[Flugzeug]:
        """Find Flugzeuge matching all criteria, ordered by ID."""
        stmt = self.query_builder.build(suchkriterien)
        result = await self.session.execute(stmt)
        models = result.unique().scalars().all()

        return [self._to_entity(m) for m in models]

    async def delete(self, entity_id: int) -> bool:
        flugzeug = await self.find_by_id(entity_id, mit_sitzplaetze=True)

        if flugzeug is None:
            return False

        return await self.delete_aggregate(flugzeug)

    async def delete_aggregate(self, flugzeug: Flugzeug) -> bool:
        """
        Delete Modell, Sitzplaetze and the Flugzeug.

        Runs inside the session's transaction; nothing is visible to
        other transactions until the caller commits.

        Returns:
            True if the Flugzeug row was deleted
        """
        if flugzeug.modell is not None and flugzeug.modell.id is not None:
            await self.session.execute(
                delete(ModellModel).where(ModellModel.id == flugzeug.modell.id)
            )

        for sitzplatz in flugzeug.sitzplaetze:
            await self.session.execute(
                delete(SitzplatzModel).where(SitzplatzModel.id == sitzplatz.id)
            )

        result = await self.session.execute(
            delete(FlugzeugModel).where(FlugzeugModel.id == flugzeug.id)
        )
        await self.session.flush()

        deleted = result.rowcount > 0
        logger.debug(
            "delete_aggregate",
            flugzeug_id=flugzeug.id,
            sitzplaetze=len(flugzeug.sitzplaetze),
            deleted=deleted,
        )
        return deleted
