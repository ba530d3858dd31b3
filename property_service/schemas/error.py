"""
Error response schemas for API documentation.
Describes the flat ``{error, code, message?, details?}`` body every failure uses.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict, Union


class ErrorDetail(BaseModel):
    """Schema for a single field-level validation problem."""

    field: Optional[str] = Field(None, description="Field that failed validation", examples=["zip_code"])

    message: str = Field(..., description="Human-readable error message")

    type: Optional[str] = Field(None, description="Error type identifier", examples=["string_pattern_mismatch"])


class APIErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    error: str = Field(..., description="Short error title", examples=["Property not found"])

    code: str = Field(..., description="Machine-readable error code", examples=["NOT_FOUND"])

    message: Optional[str] = Field(None, description="Human-readable explanation")

    details: Optional[Union[List[ErrorDetail], str]] = Field(None, description="Field errors or store message")

    request_id: Optional[str] = Field(None, description="Request identifier for log correlation")


def _example(summary: str, value: Dict[str, Any]) -> Dict[str, Any]:
    return {"summary": summary, "value": value}


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {
        "description": "Bad Request - Invalid input",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    "validation": _example("Validation Failed", {
                        "error": "Validation failed",
                        "code": "VALIDATION_ERROR",
                        "details": [
                            {
                                "field": "zip_code",
                                "message": "String should match pattern '^\\d{5}(-\\d{4})?$'",
                                "type": "string_pattern_mismatch"
                            }
                        ],
                        "request_id": "abc12345"
                    }),
                    "invalid_landlord": _example("Invalid Landlord", {
                        "error": "Invalid landlord_id",
                        "code": "BAD_REQUEST",
                        "message": "The specified landlord does not exist",
                        "request_id": "abc12345"
                    })
                }
            }
        }
    },
    403: {
        "description": "Forbidden - User is not a landlord",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": "Invalid user role",
                    "code": "FORBIDDEN",
                    "message": "Only users with landlord role can create properties",
                    "request_id": "abc12345"
                }
            }
        }
    },
    404: {
        "description": "Not Found",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": "Property not found",
                    "code": "NOT_FOUND",
                    "message": "No property found with the specified ID",
                    "request_id": "abc12345"
                }
            }
        }
    },
    409: {
        "description": "Conflict - Duplicate listing",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": "Property already exists",
                    "code": "CONFLICT",
                    "message": "A property with this address and zip code already exists",
                    "existing_property_id": 42,
                    "request_id": "abc12345"
                }
            }
        }
    },
    500: {
        "description": "Internal Server Error",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": {
                    "error": "Internal server error",
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "Failed to search properties",
                    "request_id": "abc12345"
                }
            }
        }
    },
    503: {
        "description": "Service Unavailable - Store not configured",
        "model": APIErrorResponse,
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_create_error_responses() -> Dict[int, Dict[str, Any]]:
    return get_error_responses(400, 403, 404, 409, 500, 503)


def get_read_error_responses() -> Dict[int, Dict[str, Any]]:
    return get_error_responses(400, 404, 500, 503)
