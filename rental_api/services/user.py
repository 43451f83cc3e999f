"""
User management service for admin-operated accounts.
"""

from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from rental_api.repositories.user import UserRepository
from rental_api.models.user import User
from rental_api.schemas.user import UserCreate, UserUpdate
from rental_api.services.policy import Action, can_act
from rental_api.utils.exceptions import (
    ConflictError,
    ForbiddenError,
    UserNotFoundError,
    ValidationError
)
from rental_api.utils.validators import ValidationUtils
import logging

logger = logging.getLogger(__name__)


class UserService:
    """Create, update, list and delete residential and commercial accounts."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def list_users(self) -> List[User]:
        return await self.user_repo.list_users()

    async def create_user(self, user_data: UserCreate) -> User:
        """
        Create a residential or commercial user.

        Raises:
            ConflictError: If the email is already registered
        """
        if await self.user_repo.email_taken(user_data.email):
            raise ConflictError("Email already in use")

        try:
            user = await self.user_repo.create_user(user_data.model_dump())
        except ValueError as e:
            raise ValidationError(str(e))

        return user

    async def _get_user(self, user_id: str) -> User:
        uid = ValidationUtils.parse_uuid(user_id)
        user = await self.user_repo.get_by_id(uid) if uid else None
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def update_user(self, user_id: str, patch: UserUpdate) -> User:
        """
        Apply an allow-listed patch to a user.

        Raises:
            UserNotFoundError: If the user does not exist
            ConflictError: If the new email belongs to someone else
        """
        user = await self._get_user(user_id)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)

        values = {}
        if "name" in changes:
            values["name"] = changes["name"]
        if "email" in changes and changes["email"] != user.email:
            if await self.user_repo.email_taken(changes["email"], exclude_id=user.id):
                raise ConflictError("Email already in use")
            values["email"] = changes["email"]
        if "role" in changes:
            values["role"] = changes["role"]
        if "password" in changes:
            try:
                values["hashed_password"] = User.hash_password(changes["password"])
            except ValueError as e:
                raise ValidationError.for_field("password", str(e))

        if not values:
            return user

        updated = await self.user_repo.update(user, values)
        logger.info(f"Updated user {updated.id} fields: {', '.join(sorted(values))}")
        return updated

    async def delete_user(self, user_id: str, actor: User) -> None:
        """
        Delete a non-admin user together with their listings.

        Raises:
            UserNotFoundError: If the user does not exist
            ForbiddenError: If the target is an admin
        """
        user = await self._get_user(user_id)

        if not can_act(actor, Action.DELETE_USER, user):
            logger.warning(f"Refused to delete admin account {user.email}")
            raise ForbiddenError("Cannot delete admin account")

        await self.user_repo.delete_user(user)
