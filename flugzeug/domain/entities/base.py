"""
Base entity classes for the domain layer.

All domain entities inherit from these base classes to ensure
consistent behavior and identification.
"""

from abc import ABC
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional


@dataclass(eq=False)
class Entity(ABC):
    """
    Base class for all domain entities.

    Provides:
    - Identifier generated by the database (None until persisted)
    - Creation timestamp
    - Update timestamp
    - Equality based on ID
    """

    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity) or type(self) is not type(other):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        if self.id is None:
            return id(self)
        return hash((type(self).__name__, self.id))

    @property
    def is_new(self) -> bool:
        """True until the storage layer has assigned an ID."""
        return self.id is None

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.now(timezone.utc)


@dataclass(eq=False)
class AggregateRoot(Entity):
    """
    Base class for aggregate roots.

    Aggregate roots are the main entry points for domain operations.
    They ensure consistency within their boundaries.

    The optimistic-lock `version` is assigned by the persistence layer:
    0 on insert, incremented on every successful update. Domain code never
    advances it in memory.
    """

    version: Optional[int] = None
