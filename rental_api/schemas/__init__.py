"""
Pydantic schemas for request/response validation.
"""

# Authentication schemas
from .auth import (
    LoginRequest,
    RegisterAdminRequest,
    AuthResponse
)

# User schemas
from .user import (
    UserBase,
    UserCreate,
    UserUpdate,
    UserResponse,
    UserSummary
)

# Property schemas
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    Pagination,
    PropertyListResponse,
    PropertySummary,
    MessageResponse
)

__all__ = [
    # Authentication
    "LoginRequest",
    "RegisterAdminRequest",
    "AuthResponse",

    # User
    "UserBase",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserSummary",

    # Property
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "Pagination",
    "PropertyListResponse",
    "PropertySummary",
    "MessageResponse"
]
