"""
Authentication API endpoints for admin registration and login.
"""

from fastapi import APIRouter, Depends, status
from rental_api.models.user import User
from rental_api.services.auth import AuthService
from rental_api.schemas.auth import AuthResponse, LoginRequest, RegisterAdminRequest
from rental_api.schemas.error import get_error_responses
from rental_api.schemas.user import UserResponse
from rental_api.utils.dependencies import get_auth_service
from rental_api.config import settings


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _auth_response(user: User, token: str) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user.to_dict()),
        token=token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.post(
    "/register-admin",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register the admin",
    description=(
        "Create the single admin account; fails once an admin exists. "
        "The token lives ACCESS_TOKEN_EXPIRE_MINUTES (one day by default)"
    ),
    responses=get_error_responses(400)
)
async def register_admin(
    register_data: RegisterAdminRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Register the first and only admin and return a token for it.

    Raises:
        ConflictError: If an admin already exists or the email is taken
    """
    user, token = await auth_service.register_admin(
        name=register_data.name,
        email=register_data.email,
        password=register_data.password
    )
    return _auth_response(user, token)


@router.post(
    "/login",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description=(
        "Authenticate with email and password, returns the user and a JWT. "
        "The token lives ACCESS_TOKEN_EXPIRE_MINUTES (one day by default)"
    ),
    responses=get_error_responses(400, 401)
)
async def login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthResponse:
    """
    Authenticate user and return a JWT.

    Raises:
        InvalidCredentialsError: Same response for unknown email and wrong password
    """
    user, token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    return _auth_response(user, token)
