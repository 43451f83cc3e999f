"""
Error handling service for consistent error response formatting and logging.
Every error is answered as {"error": {"code", "message", "details"?, "reason"?}};
the request id travels in the X-Request-ID header so equal failures yield equal bodies.
"""

from typing import Dict, Any, Optional, List
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.exc import SQLAlchemyError
from rental_api.utils.exceptions import APIException, ValidationError
from rental_api.utils.validators import handle_pydantic_validation_error
import logging
import uuid

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Status codes of plain HTTP exceptions mapped to error codes
HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    413: "PAYLOAD_TOO_LARGE",
}


class ErrorHandlerService:
    """
    Service for handling and formatting errors consistently across the application.
    Provides structured error responses with appropriate logging and error codes.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Format error response in a consistent structure.

        Args:
            error_code: Error code identifier
            message: Human-readable error message
            details: Optional list of field-level errors
            reason: Optional diagnostic for authentication failures

        Returns:
            Formatted error response dictionary
        """
        response = {
            "error": {
                "code": error_code,
                "message": message,
            }
        }

        if details:
            response["error"]["details"] = details

        if reason:
            response["error"]["reason"] = reason

        return response

    @staticmethod
    def _respond(
        request: Optional[Request],
        status_code: int,
        content: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        response_headers = dict(headers or {})
        response_headers[REQUEST_ID_HEADER] = ErrorHandlerService.get_request_id(request)
        return JSONResponse(status_code=status_code, content=content, headers=response_headers)

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
        request_id = ErrorHandlerService.get_request_id(request)
        details = exception.field_errors if isinstance(exception, ValidationError) else None

        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}"
            + (f" ({exception.reason})" if exception.reason else ""),
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            details=details,
            reason=exception.reason
        )

        return ErrorHandlerService._respond(request, exception.status_code, error_response, exception.headers)

    @staticmethod
    def handle_validation_error(
        exception: Any,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle request and pydantic validation errors as a 400 with field details.

        Args:
            exception: RequestValidationError or pydantic ValidationError
            request: Optional FastAPI request object

        Returns:
            JSON response with validation error details
        """
        validation_error = handle_pydantic_validation_error(exception)
        return ErrorHandlerService.handle_api_exception(validation_error, request)

    @staticmethod
    def handle_http_exception(
        exception: StarletteHTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle framework HTTP exceptions such as unknown routes.

        Args:
            exception: HTTP exception
            request: Optional FastAPI request object

        Returns:
            JSON response with HTTP error information
        """
        if isinstance(exception, APIException):
            return ErrorHandlerService.handle_api_exception(exception, request)

        request_id = ErrorHandlerService.get_request_id(request)

        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code=HTTP_ERROR_CODES.get(exception.status_code, f"HTTP_{exception.status_code}"),
            message=str(exception.detail)
        )

        return ErrorHandlerService._respond(request, exception.status_code, error_response, exception.headers)

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle database errors; internal detail is logged, never returned.

        Args:
            exception: SQLAlchemy error
            request: Optional FastAPI request object

        Returns:
            JSON response with database error information
        """
        request_id = ErrorHandlerService.get_request_id(request)

        logger.error(
            f"Database Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=exception
        )

        error_response = ErrorHandlerService.format_error_response(
            error_code="DATABASE_ERROR",
            message="Database operation failed"
        )

        return ErrorHandlerService._respond(request, 500, error_response)

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
        request_id = ErrorHandlerService.get_request_id(request)

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
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later."
        )

        return ErrorHandlerService._respond(request, 500, error_response)

    @staticmethod
    def get_request_id(request: Optional[Request] = None) -> str:
        """Request id assigned by the request middleware, or a fresh one."""
        request_id = getattr(request.state, "request_id", None) if request is not None else None
        if not request_id:
            request_id = ErrorHandlerService._generate_request_id()
            if request is not None:
                request.state.request_id = request_id
        return request_id

    @staticmethod
    def _generate_request_id() -> str:
        """Generate a unique request ID for error tracking."""
        return str(uuid.uuid4())[:8]
