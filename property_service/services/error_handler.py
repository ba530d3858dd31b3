"""
Error handling service for consistent error response formatting and logging.
Every failure leaves the service as a flat JSON body with an ``error`` title,
a machine ``code`` and either a ``message`` or ``details``.
"""

from typing import Dict, Any, Optional, List, Union
from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from property_service.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"

_REQUEST_LOCATIONS = ("body", "query", "path", "header", "cookie")


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    """

    @staticmethod
    def format_error_response(
        error: str,
        error_code: str,
        message: Optional[str] = None,
        details: Optional[Any] = None,
        request_id: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error: Short error title
            error_code: Machine-readable error code
            message: Optional human-readable explanation
            details: Optional field errors or store message
            request_id: Optional request identifier for tracking
            extra: Additional top-level fields (e.g. existing_property_id)

        Returns:
            Formatted error response dictionary
        """
        response: Dict[str, Any] = {"error": error, "code": error_code}

        if message:
            response["message"] = message

        if details:
            response["details"] = details

        if extra:
            response.update(extra)

        if request_id:
            response["request_id"] = request_id

        return jsonable_encoder(response)

    @staticmethod
    def extract_field_errors(
        exception: Union[PydanticValidationError, RequestValidationError]
    ) -> List[Dict[str, Any]]:
        """Flatten pydantic errors into ``{field, message, type}`` entries."""
        field_errors = []
        for error in exception.errors():
            loc = [str(part) for part in error.get("loc", ())]
            if loc and loc[0] in _REQUEST_LOCATIONS:
                loc = loc[1:]
            field_errors.append({
                "field": ".".join(loc) if loc else None,
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type"),
            })
        return field_errors

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle custom API exceptions with structured response.

        Args:
            exception: API exception instance
            request: Optional FastAPI request object

        Returns:
            JSON response with formatted error
        """
        request_id = ErrorHandlerService._get_request_id(request)

        log = logger.error if exception.status_code >= 500 else logger.warning
        log(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.error}"
            + (f" ({exception.message})" if exception.message else ""),
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error=exception.error,
            error_code=exception.error_code or "API_ERROR",
            message=exception.message,
            details=exception.details,
            request_id=request_id,
            extra=exception.extra
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=exception.headers
        )

    @staticmethod
    def handle_validation_error(
        exception: Union[PydanticValidationError, RequestValidationError],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle request validation errors as 400 with per-field details.

        Query-string failures are titled "Invalid search parameters",
        everything else "Validation failed".
        """
        request_id = ErrorHandlerService._get_request_id(request)

        validation_details = ErrorHandlerService.extract_field_errors(exception)
        locations = {
            str(error["loc"][0]) for error in exception.errors() if error.get("loc")
        }
        title = "Invalid search parameters" if locations == {"query"} else "Validation failed"

        logger.warning(
            f"Validation Error [{request_id}]: {len(validation_details)} field errors",
            extra={
                "error_count": len(validation_details),
                "request_id": request_id,
                "path": request.url.path if request else None,
                "validation_errors": validation_details
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error=title,
            error_code="VALIDATION_ERROR",
            details=validation_details,
            request_id=request_id
        )

        return JSONResponse(
            status_code=400,
            content=error_response
        )

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle database errors that escaped the service layer.

        Args:
            exception: SQLAlchemy error
            request: Optional FastAPI request object

        Returns:
            JSON response with database error information
        """
        request_id = ErrorHandlerService._get_request_id(request)

        if isinstance(exception, IntegrityError):
            error_code = "INTEGRITY_ERROR"
            error = "Data integrity constraint violation"
            message = ErrorHandlerService.extract_constraint_info(exception)
            status_code = 409
        else:
            error_code = "DATABASE_ERROR"
            error = "Internal server error"
            message = "Database operation failed"
            status_code = 500

        logger.error(
            f"Database Error [{request_id}]: {error_code} - {str(exception)}",
            extra={
                "error_code": error_code,
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=True
        )

        error_response = ErrorHandlerService.format_error_response(
            error=error,
            error_code=error_code,
            message=message,
            request_id=request_id
        )

        return JSONResponse(
            status_code=status_code,
            content=error_response
        )

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle framework HTTP exceptions (unknown routes, wrong methods).

        Args:
            exception: HTTP exception
            request: Optional FastAPI request object

        Returns:
            JSON response with HTTP error information
        """
        request_id = ErrorHandlerService._get_request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error=str(exception.detail),
            error_code=f"HTTP_{exception.status_code}",
            request_id=request_id
        )

        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=getattr(exception, "headers", None)
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle unexpected errors with secure error responses.

        Args:
            exception: Unexpected exception
            request: Optional FastAPI request object

        Returns:
            JSON response with generic error message
        """
        request_id = ErrorHandlerService._get_request_id(request)

        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=exception
        )

        error_response = ErrorHandlerService.format_error_response(
            error="Internal server error",
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later.",
            request_id=request_id
        )

        return JSONResponse(
            status_code=500,
            content=error_response
        )

    @staticmethod
    def constraint_sqlstate(exception: IntegrityError) -> Optional[str]:
        """
        SQLSTATE of the violated constraint.

        Falls back to the driver message text when the driver does not
        expose a code.
        """
        orig = getattr(exception, "orig", None)
        for attr in ("sqlstate", "pgcode"):
            code = getattr(orig, attr, None)
            if code:
                return str(code)

        error_msg = str(orig if orig is not None else exception).lower()
        if "foreign key constraint" in error_msg:
            return FOREIGN_KEY_VIOLATION
        if "unique constraint" in error_msg or "duplicate key" in error_msg:
            return UNIQUE_VIOLATION
        return None

    @staticmethod
    def is_foreign_key_violation(exception: IntegrityError) -> bool:
        return ErrorHandlerService.constraint_sqlstate(exception) == FOREIGN_KEY_VIOLATION

    @staticmethod
    def is_unique_violation(exception: IntegrityError) -> bool:
        return ErrorHandlerService.constraint_sqlstate(exception) == UNIQUE_VIOLATION

    @staticmethod
    def extract_constraint_info(exception: IntegrityError) -> str:
        """
        Describe an integrity error without leaking store internals.

        Args:
            exception: SQLAlchemy integrity error

        Returns:
            Constraint description
        """
        sqlstate = ErrorHandlerService.constraint_sqlstate(exception)
        if sqlstate == FOREIGN_KEY_VIOLATION:
            return "Referenced record does not exist"
        if sqlstate == UNIQUE_VIOLATION:
            return "Duplicate value for unique field"
        return "Constraint violation"

    @staticmethod
    def _get_request_id(request: Optional[Request]) -> str:
        """Reuse the middleware's request id, or mint one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]
