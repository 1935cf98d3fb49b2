"""
Database infrastructure module.
"""

from .connection import (
    Base,
    AsyncSession,
    get_engine,
    get_session_factory,
    get_session,
    init_database,
    close_database,
)
from .models import (
    FlugzeugModel,
    ModellModel,
    SitzplatzModel,
)
from .query_builder import QueryBuilder
from .repositories import (
    OptimisticLockError,
    PostgresFlugzeugRepository,
)

__all__ = [
    # Connection
    "Base",
    "AsyncSession",
    "get_engine",
    "get_session_factory",
    "get_session",
    "init_database",
    "close_database",
    # Models
    "FlugzeugModel",
    "ModellModel",
    "SitzplatzModel",
    # Queries
    "QueryBuilder",
    # Repositories
    "OptimisticLockError",
    "PostgresFlugzeugRepository",
]
