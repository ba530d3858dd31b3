"""
Custom exception classes for the property service.
Every exception carries the HTTP status, a short error title, a machine
readable code and optional message/details rendered by the error handler.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=message or error, headers=headers)
        self.error = error
        self.message = message
        self.error_code = error_code
        self.details = details
        self.extra = extra or {}


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, error: str = "Bad request", message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error=error,
            message=message,
            error_code="BAD_REQUEST"
        )


class ValidationError(APIException):
    """Input validation failure with per-field details."""

    def __init__(
        self,
        error: str = "Validation failed",
        field_errors: Optional[List[Dict[str, Any]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error=error,
            error_code="VALIDATION_ERROR",
            details=field_errors or []
        )
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error=f"{resource} not found",
            message=message,
            error_code="NOT_FOUND"
        )


class ForbiddenError(APIException):
    """Access forbidden exception."""

    def __init__(self, error: str = "Access forbidden", message: Optional[str] = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error=error,
            message=message,
            error_code="FORBIDDEN"
        )


class ConflictError(APIException):
    """Resource conflict exception."""

    def __init__(
        self,
        error: str,
        message: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error=error,
            message=message,
            error_code="CONFLICT",
            extra=extra
        )


class PayloadTooLargeError(APIException):
    """Request body exceeds the configured limit."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            error="Payload too large",
            message=f"Request size {size} bytes exceeds maximum allowed size {max_size} bytes",
            error_code="PAYLOAD_TOO_LARGE"
        )


class InternalServerError(APIException):
    """Internal server error exception."""

    def __init__(
        self,
        error: str = "Internal server error",
        message: Optional[str] = None,
        details: Optional[Any] = None
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            error=error,
            message=message,
            error_code="INTERNAL_SERVER_ERROR",
            details=details
        )


class ServiceUnavailableError(APIException):
    """Service unavailable exception."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="Service unavailable",
            message=message,
            error_code="SERVICE_UNAVAILABLE"
        )


# Property specific exceptions
class InvalidPropertyIdError(BadRequestError):
    """Path id is not an integer."""

    def __init__(self):
        super().__init__("Invalid property ID", "Property ID must be a number")


class PropertyNotFoundError(NotFoundError):
    """Property not found exception."""

    def __init__(self):
        super().__init__("Property", "No property found with the specified ID")


class DuplicatePropertyError(ConflictError):
    """A listing with the same address and zip code already exists."""

    def __init__(self, existing_property_id: Optional[int] = None):
        super().__init__(
            "Property already exists",
            "A property with this address and zip code already exists",
            extra={"existing_property_id": existing_property_id}
        )
        self.existing_property_id = existing_property_id


class SchemaSetupError(InternalServerError):
    """DDL execution failed; details carry the store's message."""

    def __init__(self, details: str):
        super().__init__(error="Failed to create properties table", details=details)


# Landlord specific exceptions
class LandlordNotFoundError(NotFoundError):
    """Referenced landlord_id has no users row."""

    def __init__(self):
        super().__init__("Landlord", "The specified landlord_id does not exist")


class InvalidLandlordRoleError(ForbiddenError):
    """Referenced user exists but is not a landlord."""

    def __init__(self):
        super().__init__(
            "Invalid user role",
            "Only users with landlord role can create properties"
        )


class InvalidLandlordError(BadRequestError):
    """Foreign key violation on landlord_id raised by the store."""

    def __init__(self):
        super().__init__("Invalid landlord_id", "The specified landlord does not exist")
