"""
Database models for the Rental Listing API.
Includes User and Property models with their ownership relationship.
"""

from rental_api.models.user import User, UserRole
from rental_api.models.property import Property, PropertyType

# Export all models for easy importing
__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyType",
]
