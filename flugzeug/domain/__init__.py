"""
Domain layer module.

Contains business entities and domain exceptions.
This layer is independent of infrastructure and frameworks.
"""

from .entities import (
    Entity,
    AggregateRoot,
    Flugzeug,
    Modell,
    Sitzplatz,
)
from .exceptions import (
    DomainException,
    FlugzeugException,
    FlugzeugNotFoundError,
    InvalidSearchCriteriaError,
    VersionException,
    VersionInvalidError,
    VersionOutdatedError,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    "Flugzeug",
    "Modell",
    "Sitzplatz",
    # Exceptions
    "DomainException",
    "FlugzeugException",
    "FlugzeugNotFoundError",
    "InvalidSearchCriteriaError",
    "VersionException",
    "VersionInvalidError",
    "VersionOutdatedError",
]
