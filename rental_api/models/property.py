"""
Property model for rental listings.
Handles listing data, pricing, feature tags, image references and ownership.
"""

from sqlalchemy import String, Text, Numeric, Enum as SQLEnum, Index, ForeignKey, JSON, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from rental_api.database import Base
from decimal import Decimal
import enum
import uuid
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from rental_api.models.user import User


class PropertyType(str, enum.Enum):
    """Listing type; non-admin owners are bound to the type matching their role."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"


class Property(Base):
    """
    Property listing owned by the user who created it.
    Every listing carries at least one image reference.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Listing title"
    )

    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType, values_callable=lambda types: [t.value for t in types]),
        nullable=False,
        index=True,
        comment="Listing type - residential or commercial"
    )

    location: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Street address or landmark"
    )

    area: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Free-text locality"
    )

    maps_link: Mapped[Optional[str]] = mapped_column(
        String(1024),
        nullable=True,
        comment="Optional map URL"
    )

    rent: Mapped[Decimal] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=False,
        comment="Monthly rent"
    )

    deposit: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
        comment="Security deposit; NULL when not set"
    )

    features: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered feature tags"
    )

    owner_details: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Owner contact text"
    )

    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered image references (URLs or /uploads paths)"
    )

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="ID of the user who created this listing"
    )

    created_by: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
        lazy="selectin"
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title[:30]}, rent={self.rent})>"

    def validate_amounts(self) -> None:
        """
        Validate rent and deposit.

        Raises:
            ValueError: If an amount is negative
        """
        if self.rent is None or self.rent < 0:
            raise ValueError("Rent must be a non-negative number")

        if self.deposit is not None and self.deposit < 0:
            raise ValueError("Deposit must be a non-negative number")

    def validate_images(self) -> None:
        if not self.images:
            raise ValueError("At least one image is required")

    def validate_all(self) -> None:
        """
        Run all validation checks on the property.

        Raises:
            ValueError: If any validation fails
        """
        self.validate_amounts()
        self.validate_images()

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.created_by_id == user_id

    def to_dict(self) -> dict:
        """Public representation with the creator summary embedded."""
        creator = self.created_by
        return {
            "id": str(self.id),
            "title": self.title,
            "type": self.property_type.value,
            "location": self.location,
            "area": self.area,
            "maps_link": self.maps_link,
            "rent": float(self.rent),
            "deposit": float(self.deposit) if self.deposit is not None else None,
            "features": list(self.features or []),
            "owner_details": self.owner_details,
            "images": list(self.images or []),
            "created_by": {
                "id": str(creator.id),
                "name": creator.name,
                "email": creator.email,
                "role": creator.role.value,
            } if creator else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# Listing browse: owner scope, newest first
owner_created_index = Index(
    'idx_properties_owner_created',
    Property.created_by_id,
    Property.created_at.desc()
)

# Summary counts by type
type_created_index = Index(
    'idx_properties_type_created',
    Property.property_type,
    Property.created_at
)
