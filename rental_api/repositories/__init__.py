"""
Repository layer for data access operations.
"""

from rental_api.repositories.base import BaseRepository
from rental_api.repositories.property import PropertyRepository, PropertyFilters
from rental_api.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertyFilters",
    "UserRepository"
]
