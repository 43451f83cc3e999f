"""
Pydantic schemas for user requests and responses.
Handles admin-managed user creation and updates with email normalization.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime
from rental_api.models.user import UserRole, MIN_PASSWORD_LENGTH

MANAGED_ROLES = (UserRole.RESIDENTIAL, UserRole.COMMERCIAL)


def _managed_role(v: Optional[UserRole]) -> Optional[UserRole]:
    if v is not None and v not in MANAGED_ROLES:
        raise ValueError("Role must be residential or commercial")
    return v


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is not None:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()
    return v


class UserBase(BaseModel):
    """Base user schema with common fields."""

    name: str = Field(
        ...,
        max_length=255,
        description="User's display name",
        examples=["Jane Doe"]
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)


class UserCreate(UserBase):
    """Schema for an admin creating a residential or commercial user."""

    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"Password (minimum {MIN_PASSWORD_LENGTH} characters)"
    )

    role: UserRole = Field(
        ...,
        description="residential or commercial",
        examples=["residential"]
    )

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        return _managed_role(v)


class UserUpdate(BaseModel):
    """
    Schema for updating an existing user.
    Only the named fields can ever reach the database.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=MIN_PASSWORD_LENGTH, max_length=128)
    role: Optional[UserRole] = None

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        if v is not None:
            return v.lower().strip()
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        return _managed_role(v)


class UserResponse(BaseModel):
    """User response schema (excluding sensitive data)."""

    id: str = Field(..., description="User's unique identifier")
    name: str
    email: str
    role: UserRole
    created_at: Optional[datetime] = None


class UserSummary(BaseModel):
    """Creator details embedded in property responses."""

    id: str
    name: str
    email: str
    role: UserRole
