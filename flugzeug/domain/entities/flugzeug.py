"""
Flugzeug aggregate: an aircraft with its Modell and its Sitzplaetze.

Children reference their owner by ``flugzeug_id`` only. The in-memory
graph is the Flugzeug holding its children, never a cycle.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from .base import AggregateRoot, Entity


@dataclass(eq=False)
class Modell(Entity):
    """
    Model designation of exactly one Flugzeug.

    Attributes:
        modell: Model name, e.g. "A320neo"
        flugzeug_id: ID of the owning Flugzeug
    """

    modell: str = ""
    flugzeug_id: Optional[int] = None

    def __str__(self) -> str:
        return self.modell


@dataclass(eq=False)
class Sitzplatz(Entity):
    """
    Seat class offered by a Flugzeug.

    Attributes:
        sitzplatzklasse: Seat class label, e.g. "Klasse 1"
        flugzeug_id: ID of the owning Flugzeug
    """

    sitzplatzklasse: str = ""
    flugzeug_id: Optional[int] = None


@dataclass(eq=False)
class Flugzeug(AggregateRoot):
    """
    Aircraft aggregate root.

    Attributes:
        preis: Price, positive
        einsatzbereit: Whether the aircraft is operational
        baujahr: Date of manufacture
        modell: The owned Modell (exactly one once created)
        sitzplaetze: The owned seat classes, possibly empty
    """

    # Scalar properties that may appear as equality search criteria.
    # The Modell name is searched separately via the "modell" key.
    SEARCHABLE_PROPERTIES = frozenset({
        "id",
        "version",
        "preis",
        "einsatzbereit",
        "baujahr",
        "created_at",
        "updated_at",
    })

    # Scalar properties replaced by an update.
    UPDATABLE_PROPERTIES = ("preis", "einsatzbereit", "baujahr")

    preis: Optional[Decimal] = None
    einsatzbereit: Optional[bool] = None
    baujahr: Optional[date] = None

    modell: Optional[Modell] = None
    sitzplaetze: list[Sitzplatz] = field(default_factory=list)

    @classmethod
    def is_search_key(cls, key: str) -> bool:
        """Check whether ``key`` is a valid search criterion name."""
        return key == "modell" or key in cls.SEARCHABLE_PROPERTIES

    def merge(self, patch: "Flugzeug") -> None:
        """Copy the updatable scalar fields that are set on ``patch``."""
        for name in self.UPDATABLE_PROPERTIES:
            value = getattr(patch, name)
            if value is not None:
                setattr(self, name, value)

    def __str__(self) -> str:
        return (
            f"Flugzeug(id={self.id}, version={self.version}, preis={self.preis}, "
            f"einsatzbereit={self.einsatzbereit}, baujahr={self.baujahr})"
        )
