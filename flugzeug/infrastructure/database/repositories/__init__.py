"""
Repository implementations.
"""

from .base import BaseRepository, OptimisticLockError
from .flugzeug_repo import PostgresFlugzeugRepository

__all__ = [
    "BaseRepository",
    "OptimisticLockError",
    "PostgresFlugzeugRepository",
]
