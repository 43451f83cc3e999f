"""
Authentication service for login, admin registration and token resolution.
"""

from typing import Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from rental_api.config import settings
from rental_api.repositories.user import UserRepository
from rental_api.models.user import User, UserRole, pwd_context
from rental_api.services.policy import can_register_admin
from rental_api.utils.auth import create_access_token, verify_token
from rental_api.utils.exceptions import (
    ConflictError,
    InvalidCredentialsError,
    UnauthorizedError,
    ValidationError
)
from jose import ExpiredSignatureError, JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for credential checks and token handling.
    Every failure to resolve a caller surfaces as the same 401 "Unauthorized".
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    def issue_token(self, user: User) -> str:
        return create_access_token(user_id=user.id, role=user.role)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """
        Authenticate user and create an access token.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            Tuple of (user, access_token)

        Raises:
            InvalidCredentialsError: Unknown email and wrong password alike
        """
        user = await self.user_repo.get_by_email(email)

        if user is None:
            # Keep the timing of unknown emails close to wrong passwords
            pwd_context.dummy_verify()
            logger.warning(f"Failed login attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.verify_password(password):
            logger.warning(f"Failed login attempt for email: {email}")
            raise InvalidCredentialsError()

        logger.info(f"User logged in: {user.email}")
        return user, self.issue_token(user)

    async def register_admin(self, name: str, email: str, password: str) -> Tuple[User, str]:
        """
        Create the single admin account.

        Raises:
            ConflictError: If an admin already exists or the email is taken
        """
        if not can_register_admin(await self.user_repo.count_admins()):
            logger.warning(f"Rejected admin registration for {email}: admin already exists")
            raise ConflictError("Admin already exists")

        if await self.user_repo.email_taken(email):
            raise ConflictError("Email already in use")

        try:
            user = await self.user_repo.create_user({
                "name": name,
                "email": email,
                "password": password,
                "role": UserRole.ADMIN,
            })
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Admin registered: {user.email}")
        return user, self.issue_token(user)

    async def get_current_user(self, token: Optional[str]) -> User:
        """
        Resolve the acting user from a bearer token.

        Raises:
            UnauthorizedError: With a diagnostic reason for every failure mode
        """
        if not token:
            raise UnauthorizedError(reason="Missing bearer token")

        try:
            payload = verify_token(token)
        except ExpiredSignatureError:
            raise UnauthorizedError(reason="Token expired")
        except JWTError as e:
            raise UnauthorizedError(reason=f"Invalid token: {str(e)}")

        try:
            user_id = uuid.UUID(payload.user_id)
        except (ValueError, TypeError):
            raise UnauthorizedError(reason="Invalid token subject")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UnauthorizedError(reason="User not found")

        return user


async def seed_admin(db_session: AsyncSession) -> Optional[User]:
    """
    Create the admin from ADMIN_NAME/ADMIN_EMAIL/ADMIN_PASSWORD when none exists.

    Returns:
        The created admin, or None when seeding was skipped
    """
    if not settings.admin_seed_configured:
        logger.debug("Admin seed credentials not configured, skipping")
        return None

    user_repo = UserRepository(db_session)
    if await user_repo.count_admins() > 0:
        logger.debug("Admin already exists, skipping seed")
        return None

    admin = await user_repo.create_user({
        "name": settings.admin_name,
        "email": settings.admin_email,
        "password": settings.admin_password,
        "role": UserRole.ADMIN,
    })
    logger.info(f"Seeded admin account {admin.email}")
    return admin
