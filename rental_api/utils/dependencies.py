"""
FastAPI dependency injection utilities for authentication, authorization and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Callable, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from rental_api.database import get_db
from rental_api.models.user import User, UserRole
from rental_api.services.auth import AuthService
from rental_api.services.policy import Action, roles_for
from rental_api.services.property import PropertyService
from rental_api.services.storage import ImageStorage, get_image_storage
from rental_api.services.user import UserService
from rental_api.utils.exceptions import ForbiddenError
import logging

logger = logging.getLogger(__name__)

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage)
) -> PropertyService:
    """
    Get property service instance wired to the configured image storage.

    Args:
        db: Database session
        storage: Image storage backend

    Returns:
        PropertyService instance
    """
    return PropertyService(db, storage)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid, expired or names no user
    """
    token = credentials.credentials if credentials else None
    return await auth_service.get_current_user(token)


def authorize(*roles: UserRole) -> Callable:
    """
    Create a dependency that admits only the given roles.

    Args:
        roles: Roles allowed through

    Returns:
        Dependency function returning the current user
    """
    allowed = frozenset(roles)

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            logger.warning(
                f"User {current_user.email} ({current_user.role.value}) denied; requires {sorted(r.value for r in allowed)}"
            )
            raise ForbiddenError()
        return current_user

    return role_checker


def require_action(action: Action) -> Callable:
    """Role gate for an action, using the policy's role table."""
    return authorize(*roles_for(action))
