"""
Base repository implementation.

Provides the shared save path for all repositories
with optimistic locking support.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm.exc import StaleDataError

import structlog

from flugzeug.domain.exceptions import VersionOutdatedError

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=DeclarativeBase)
EntityT = TypeVar("EntityT")


class OptimisticLockError(VersionOutdatedError):
    """Raised when the stored row no longer has the version that was read."""

    def __init__(self, entity_type: str, entity_id: str, version: Optional[int] = None):
        super().__init__(version)
        self.message = (
            f"Optimistic lock failed for {entity_type} {entity_id}. "
            "The entity was modified by another transaction."
        )
        self.args = (self.message,)
        self.code = "OPTIMISTIC_LOCK_ERROR"
        self.entity_type = entity_type
        self.entity_id = entity_id


class BaseRepository(Generic[ModelT, EntityT]):
    """
    Base repository with the common save operation.

    Implements:
    - Insert or update of an entity graph
    - Optimistic locking on the entity's ``version``
    """

    model_class: Type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    def _to_entity(self, model: ModelT) -> EntityT:
        """Convert model to domain entity. Override in subclass."""
        raise NotImplementedError

    def _to_model(
        self,
        entity: EntityT,
        model: Optional[ModelT] = None,
    ) -> ModelT:
        """Convert domain entity to model. Override in subclass."""
        raise NotImplementedError

    async def _get_model(self, entity_id: int) -> Optional[ModelT]:
        stmt = (
            select(self.model_class)
            .where(self.model_class.id == entity_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    def _lock_failed(self, entity: EntityT) -> OptimisticLockError:
        logger.warning(
            "Optimistic lock failed",
            entity_type=self.model_class.__name__,
            entity_id=entity.id,
            version=entity.version,
        )
        return OptimisticLockError(
            entity_type=self.model_class.__name__,
            entity_id=str(entity.id),
            version=entity.version,
        )

    async def save(self, entity: EntityT) -> EntityT:
        """
        Save entity (create or update).

        New entities (no ID) are inserted. An existing row is only updated
        while its stored version still equals ``entity.version``; the
        versioned UPDATE repeats that check at flush time.

        Args:
            entity: Entity to save

        Returns:
            Saved entity with generated ID and current version

        Raises:
            OptimisticLockError: If the row was changed since the entity was read
        """
        existing = None
        if entity.id is not None:
            existing = await self._get_model(entity.id)

        if existing is not None:
            if existing.version != entity.version:
                raise self._lock_failed(entity)
            model = self._to_model(entity, existing)
        else:
            model = self._to_model(entity)
            self.session.add(model)

        try:
            await self.session.flush()
        except StaleDataError as e:
            raise self._lock_failed(entity) from e

        return self._to_entity(model)
