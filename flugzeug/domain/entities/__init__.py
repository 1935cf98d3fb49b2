"""
Domain entities.
"""

from .base import Entity, AggregateRoot
from .flugzeug import Flugzeug, Modell, Sitzplatz

__all__ = [
    # Base
    "Entity",
    "AggregateRoot",
    # Flugzeug
    "Flugzeug",
    "Modell",
    "Sitzplatz",
]
