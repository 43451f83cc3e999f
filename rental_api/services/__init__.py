"""
Service layer for business logic implementation.
Contains services for authentication, user and property management, image storage and error handling.
"""

from .auth import AuthService
from .user import UserService
from .property import PropertyService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "UserService",
    "PropertyService",
    "ErrorHandlerService"
]
