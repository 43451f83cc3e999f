"""
Error response schemas used for OpenAPI documentation.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ErrorDetail(BaseModel):
    """A single field-level validation problem."""

    field: Optional[str] = Field(
        None,
        description="Dotted path of the offending field",
        examples=["rent"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Rent must be a number"]
    )


class ErrorBody(BaseModel):
    code: str = Field(..., description="Machine-readable error code", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message")
    details: Optional[List[ErrorDetail]] = Field(None, description="Field-level errors")
    reason: Optional[str] = Field(None, description="Diagnostic reason for authentication failures")


class APIErrorResponse(BaseModel):
    """Envelope of every error response; the request id is sent in X-Request-ID."""

    error: ErrorBody


def _example(code: str, message: str, **extra: Any) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, **extra}}


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {
        "description": "Bad Request - validation failed or the request conflicts with existing data",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "examples": {
                    "validation_error": {
                        "summary": "Validation Error",
                        "value": _example(
                            "VALIDATION_ERROR",
                            "Request validation failed",
                            details=[{"field": "title", "message": "Value error, Title is required"}]
                        )
                    },
                    "conflict": {
                        "summary": "Conflict",
                        "value": _example("CONFLICT", "Email already in use")
                    }
                }
            }
        }
    },
    401: {
        "description": "Unauthorized - missing, invalid or expired token",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("UNAUTHORIZED", "Unauthorized", reason="Token expired")
            }
        }
    },
    403: {
        "description": "Forbidden - role or ownership check failed",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("FORBIDDEN", "You can only edit your own properties")
            }
        }
    },
    404: {
        "description": "Not Found",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example("NOT_FOUND", "Property not found")
            }
        }
    },
    500: {
        "description": "Internal Server Error",
        "model": APIErrorResponse,
        "content": {
            "application/json": {
                "example": _example(
                    "INTERNAL_SERVER_ERROR",
                    "An unexpected error occurred. Please try again later."
                )
            }
        }
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


def get_auth_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get authentication and authorization error response schemas."""
    return get_error_responses(401, 403)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 500)
