"""
API routes module.
"""

from .flugzeug_read import router as flugzeug_read_router
from .flugzeug_write import router as flugzeug_write_router

__all__ = [
    "flugzeug_read_router",
    "flugzeug_write_router",
]
