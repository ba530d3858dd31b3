"""
Utility modules for the property service.
"""

from .exceptions import (
    APIException,
    BadRequestError,
    ValidationError,
    NotFoundError,
    ForbiddenError,
    ConflictError,
    PayloadTooLargeError,
    InternalServerError,
    ServiceUnavailableError,
    InvalidPropertyIdError,
    PropertyNotFoundError,
    DuplicatePropertyError,
    SchemaSetupError,
    LandlordNotFoundError,
    InvalidLandlordRoleError,
    InvalidLandlordError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    "APIException",
    "BadRequestError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "PayloadTooLargeError",
    "InternalServerError",
    "ServiceUnavailableError",
    "InvalidPropertyIdError",
    "PropertyNotFoundError",
    "DuplicatePropertyError",
    "SchemaSetupError",
    "LandlordNotFoundError",
    "InvalidLandlordRoleError",
    "InvalidLandlordError",
]
