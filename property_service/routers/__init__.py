"""
API route handlers for the property service.
"""

from .properties import router as properties_router
from .system import router as system_router

__all__ = ["properties_router", "system_router"]
