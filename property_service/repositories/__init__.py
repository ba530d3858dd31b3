"""
Repository layer for data access operations.
"""

from property_service.repositories.base import BaseRepository
from property_service.repositories.property import PropertyRepository, PropertySearchQuery
from property_service.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchQuery",
    "UserRepository"
]
