"""
Service layer for business logic implementation.
Contains the property service and error handling.
"""

from .property import PropertyService
from .error_handler import ErrorHandlerService

__all__ = [
    "PropertyService",
    "ErrorHandlerService"
]
