"""
User repository for authentication and user management operations.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from rental_api.repositories.base import BaseRepository
from rental_api.models.user import User, UserRole
from typing import Optional, List, Dict, Any
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.
    Emails are stored normalized; passwords only ever as bcrypt hashes.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email normalization and password hashing.

        Args:
            user_data: Dictionary containing user information
                      Must include: name, email, password, role

        Returns:
            Created user instance

        Raises:
            ValueError: If the email is invalid, already registered or the password is too short
        """
        email = User.normalize_email(user_data["email"])

        existing_user = await self.get_by_email(email)
        if existing_user:
            raise ValueError(f"User with email {email} already exists")

        create_data = {
            "name": user_data["name"].strip(),
            "email": email,
            "hashed_password": User.hash_password(user_data["password"]),
            "role": user_data["role"],
        }

        created_user = await self.create(create_data)
        logger.info(f"Created user: {created_user.email} (ID: {created_user.id}, role: {created_user.role.value})")
        return created_user

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Email address, matched after lower-casing and trimming

        Returns:
            User instance if found, None otherwise
        """
        query = select(User).where(User.email == email.strip().lower())
        result = await self.db.execute(query)
        user = result.scalar_one_or_none()

        if user is None:
            logger.debug(f"User with email {email} not found")

        return user

    async def email_taken(self, email: str, exclude_id: Optional[Any] = None) -> bool:
        query = select(func.count(User.id)).where(User.email == email.strip().lower())
        if exclude_id is not None:
            query = query.where(User.id != exclude_id)

        result = await self.db.execute(query)
        return (result.scalar() or 0) > 0

    async def count_admins(self) -> int:
        return await self.count({"role": UserRole.ADMIN})

    async def list_users(self) -> List[User]:
        """All users, newest first."""
        return await self.get_multi()

    async def delete_user(self, user: User) -> None:
        """Delete a user and, through the ORM cascade, every listing they created."""
        await self.db.refresh(user, attribute_names=["properties"])
        listing_count = len(user.properties)
        await self.delete(user)
        logger.info(f"Deleted user {user.email} with {listing_count} listing(s)")
