"""
User management API endpoints, admin only.
"""

from typing import List
from fastapi import APIRouter, Depends, status
from rental_api.models.user import User
from rental_api.services.policy import Action
from rental_api.services.user import UserService
from rental_api.schemas.error import get_crud_error_responses
from rental_api.schemas.property import MessageResponse
from rental_api.schemas.user import UserCreate, UserResponse, UserUpdate
from rental_api.utils.dependencies import get_user_service, require_action


router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
    description="All users, newest first",
    responses=get_crud_error_responses()
)
async def list_users(
    current_user: User = Depends(require_action(Action.LIST_USERS)),
    user_service: UserService = Depends(get_user_service)
) -> List[UserResponse]:
    users = await user_service.list_users()
    return [UserResponse.model_validate(user.to_dict()) for user in users]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
    description="Create a residential or commercial user",
    responses=get_crud_error_responses()
)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_action(Action.CREATE_USER)),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.create_user(user_data)
    return UserResponse.model_validate(user.to_dict())


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update user",
    description="Update name, email, role or password of a user",
    responses=get_crud_error_responses()
)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: User = Depends(require_action(Action.UPDATE_USER)),
    user_service: UserService = Depends(get_user_service)
) -> UserResponse:
    user = await user_service.update_user(user_id, user_data)
    return UserResponse.model_validate(user.to_dict())


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete user",
    description="Delete a non-admin user and the listings they created",
    responses=get_crud_error_responses()
)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_action(Action.DELETE_USER)),
    user_service: UserService = Depends(get_user_service)
) -> MessageResponse:
    """
    Delete a user.

    Raises:
        UserNotFoundError: If the user does not exist
        ForbiddenError: If the target is an admin
    """
    await user_service.delete_user(user_id, current_user)
    return MessageResponse(message="User deleted")
