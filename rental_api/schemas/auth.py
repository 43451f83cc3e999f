"""
Pydantic schemas for authentication requests and responses.
Handles admin registration, login and token responses.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from rental_api.schemas.user import UserBase, UserResponse
from rental_api.models.user import MIN_PASSWORD_LENGTH


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["owner@example.com"]
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="User's password"
    )

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        """Normalize email to lowercase."""
        return v.lower().strip()


class RegisterAdminRequest(UserBase):
    """Registration of the single admin account."""

    password: str = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        max_length=128,
        description=f"Password (minimum {MIN_PASSWORD_LENGTH} characters)"
    )


class AuthResponse(BaseModel):
    """User plus signed access token."""

    user: UserResponse
    token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds", examples=[86400])
