"""
Database models for the property service.
"""

from property_service.models.user import User, UserRole
from property_service.models.property import Property, address_zip_unique_index

__all__ = [
    "User",
    "UserRole",
    "Property",
    "address_zip_unique_index",
]
