"""
Abstract repository interfaces.

Defines contracts for data access that the application layer
depends on. Implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Mapping, Optional, TypeVar

from flugzeug.domain.entities import Flugzeug

T = TypeVar("T")


class Repository(ABC, Generic[T]):
    """
    Base repository interface.

    Defines the write operations shared by all entities.
    """

    @abstractmethod
    async def save(self, entity: T) -> T:
        """Save entity (create or update)."""
        pass

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete entity by ID. Returns True if deleted."""
        pass


class FlugzeugRepository(Repository[Flugzeug]):
    """Repository interface for Flugzeug aggregates."""

    @abstractmethod
    async def find_by_id(
        self,
        flugzeug_id: int,
        mit_sitzplaetze: bool = False,
    ) -> Optional[Flugzeug]:
        """Get a Flugzeug with its Modell, optionally with Sitzplaetze."""
        pass

    @abstractmethod
    async def find(
        self,
        suchkriterien: Optional[Mapping[str, Any]] = None,
    ) -> list[Flugzeug]:
        """Find Flugzeuge matching all given criteria."""
        pass

    @abstractmethod
    async def delete_aggregate(self, flugzeug: Flugzeug) -> bool:
        """Delete Modell, Sitzplaetze and the Flugzeug in one unit of work."""
        pass
