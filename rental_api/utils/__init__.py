"""
Utility modules for the Rental Listing API.
"""

from .auth import (
    create_access_token,
    verify_token,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    InvalidCredentialsError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    UserNotFoundError,
    FileUploadError,
    RequestTooLargeError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "verify_token",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "InvalidCredentialsError",
    "PropertyNotFoundError",
    "PropertyOwnershipError",
    "UserNotFoundError",
    "FileUploadError",
    "RequestTooLargeError",
]
