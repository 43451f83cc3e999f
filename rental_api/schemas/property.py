"""
Pydantic schemas for property requests and responses.
Handles listing create/update validation, list pagination and the admin summary.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Optional
from datetime import datetime
from decimal import Decimal
from rental_api.models.property import PropertyType
from rental_api.schemas.user import UserSummary
from rental_api.utils.normalizers import normalize_features
from rental_api.utils.validators import ValidationUtils


def _required_text(v: Any, label: str) -> str:
    if v is None or not str(v).strip():
        raise ValueError(f"{label} is required")
    return str(v).strip()


def _optional_text(v: Any) -> Optional[str]:
    if v is None:
        return None
    v = str(v).strip()
    return v or None


def _optional_type(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class PropertyCreate(BaseModel):
    """Validated fields of a new listing; images and owner are supplied separately."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(
        ...,
        max_length=255,
        description="Listing title",
        examples=["2BHK near Metro Station"]
    )

    location: str = Field(
        ...,
        max_length=255,
        description="Street address or landmark",
        examples=["12 MG Road"]
    )

    area: str = Field(
        ...,
        max_length=255,
        description="Locality",
        examples=["Indiranagar"]
    )

    rent: Decimal = Field(
        ...,
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Monthly rent",
        examples=[25000]
    )

    deposit: Optional[Decimal] = Field(
        None,
        ge=0,
        max_digits=12,
        decimal_places=2,
        description="Security deposit; empty means not set",
        examples=[50000]
    )

    property_type: Optional[PropertyType] = Field(
        None,
        alias="type",
        description="residential or commercial; only honored for admins",
        examples=["residential"]
    )

    maps_link: Optional[str] = Field(None, max_length=1024)
    owner_details: Optional[str] = Field(None, max_length=5000)

    features: List[str] = Field(
        default_factory=list,
        description="Feature tags, as a list or a comma-separated string",
        examples=[["Parking", "Lift"]]
    )

    @field_validator('title', mode='before')
    @classmethod
    def validate_title(cls, v):
        return _required_text(v, "Title")

    @field_validator('location', mode='before')
    @classmethod
    def validate_location(cls, v):
        return _required_text(v, "Location")

    @field_validator('area', mode='before')
    @classmethod
    def validate_area(cls, v):
        return _required_text(v, "Area")

    @field_validator('rent', mode='before')
    @classmethod
    def validate_rent(cls, v):
        """Rent is required and must be numeric."""
        try:
            amount = ValidationUtils.parse_optional_amount(v)
        except ValueError:
            raise ValueError("Rent must be a number")
        if amount is None:
            raise ValueError("Rent must be a number")
        return amount

    @field_validator('deposit', mode='before')
    @classmethod
    def validate_deposit(cls, v):
        try:
            return ValidationUtils.parse_optional_amount(v)
        except ValueError:
            raise ValueError("Deposit must be a number")

    @field_validator('property_type', mode='before')
    @classmethod
    def validate_property_type(cls, v):
        return _optional_type(v)

    @field_validator('maps_link', 'owner_details', mode='before')
    @classmethod
    def validate_optional_text(cls, v):
        return _optional_text(v)

    @field_validator('features', mode='before')
    @classmethod
    def validate_features(cls, v):
        return normalize_features(v)


class PropertyUpdate(BaseModel):
    """
    Allow-listed patch for an existing listing.
    Apply with model_dump(exclude_unset=True); fields never named here are never written.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field(None, max_length=255)
    location: Optional[str] = Field(None, max_length=255)
    area: Optional[str] = Field(None, max_length=255)
    rent: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    deposit: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
    property_type: Optional[PropertyType] = Field(None, alias="type")
    maps_link: Optional[str] = Field(None, max_length=1024)
    owner_details: Optional[str] = Field(None, max_length=5000)
    features: Optional[List[str]] = None

    @field_validator('title', mode='before')
    @classmethod
    def validate_title(cls, v):
        if v is not None:
            return _required_text(v, "Title")
        return v

    @field_validator('location', mode='before')
    @classmethod
    def validate_location(cls, v):
        if v is not None:
            return _required_text(v, "Location")
        return v

    @field_validator('area', mode='before')
    @classmethod
    def validate_area(cls, v):
        if v is not None:
            return _required_text(v, "Area")
        return v

    @field_validator('rent', mode='before')
    @classmethod
    def validate_rent(cls, v):
        try:
            amount = ValidationUtils.parse_optional_amount(v)
        except ValueError:
            raise ValueError("Rent must be a number")
        if amount is None:
            raise ValueError("Rent must be a number")
        return amount

    @field_validator('deposit', mode='before')
    @classmethod
    def validate_deposit(cls, v):
        # An explicitly empty deposit clears it
        try:
            return ValidationUtils.parse_optional_amount(v)
        except ValueError:
            raise ValueError("Deposit must be a number")

    @field_validator('property_type', mode='before')
    @classmethod
    def validate_property_type(cls, v):
        return _optional_type(v)

    @field_validator('maps_link', 'owner_details', mode='before')
    @classmethod
    def validate_optional_text(cls, v):
        return _optional_text(v)

    @field_validator('features', mode='before')
    @classmethod
    def validate_features(cls, v):
        return normalize_features(v)


class PropertyResponse(BaseModel):
    """Public representation of a listing."""

    id: str = Field(..., description="Property unique identifier")
    title: str
    type: PropertyType = Field(..., description="Listing type")
    location: str
    area: str
    maps_link: Optional[str] = None
    rent: float
    deposit: Optional[float] = None
    features: List[str] = Field(default_factory=list)
    owner_details: Optional[str] = None
    images: List[str] = Field(default_factory=list, description="Image references in upload order")
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Pagination(BaseModel):
    total: int = Field(..., description="Number of matching listings")
    page: int = Field(..., description="Current page (1-based)")
    pages: int = Field(..., description="Total number of pages")
    limit: int = Field(..., description="Page size")


class PropertyListResponse(BaseModel):
    """Paginated listing response."""

    items: List[PropertyResponse]
    pagination: Pagination


class PropertySummary(BaseModel):
    """Admin dashboard counts."""

    total: int = Field(..., description="All listings")
    today: int = Field(..., description="Listings created since local midnight")
    residential: int
    commercial: int


class MessageResponse(BaseModel):
    message: str
