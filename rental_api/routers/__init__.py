"""
API route handlers for the Rental Listing API.
"""

from .auth import router as auth_router
from .users import router as users_router
from .properties import router as properties_router
from .health import router as health_router

__all__ = ["auth_router", "users_router", "properties_router", "health_router"]
