"""
Application services.
"""

from .flugzeug_read_service import FlugzeugReadService
from .flugzeug_write_service import FlugzeugWriteService

__all__ = [
    "FlugzeugReadService",
    "FlugzeugWriteService",
]
