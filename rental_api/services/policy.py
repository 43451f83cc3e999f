"""
Authorization policy for users and property listings.
Pure decisions over role and ownership; callers turn a False into a rejection.
"""

from typing import Dict, FrozenSet, Optional, Union
import enum

from rental_api.models.property import Property, PropertyType
from rental_api.models.user import User, UserRole


class Action(str, enum.Enum):
    """Actions guarded by the policy."""
    LIST_USERS = "users.list"
    CREATE_USER = "users.create"
    UPDATE_USER = "users.update"
    DELETE_USER = "users.delete"
    VIEW_SUMMARY = "properties.summary"
    LIST_PROPERTIES = "properties.list"
    CREATE_PROPERTY = "properties.create"
    UPDATE_PROPERTY = "properties.update"
    DELETE_PROPERTY = "properties.delete"


ADMIN_ONLY: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})
ALL_ROLES: FrozenSet[UserRole] = frozenset(UserRole)

# Roles permitted to attempt each action
ACTION_ROLES: Dict[Action, FrozenSet[UserRole]] = {
    Action.LIST_USERS: ADMIN_ONLY,
    Action.CREATE_USER: ADMIN_ONLY,
    Action.UPDATE_USER: ADMIN_ONLY,
    Action.DELETE_USER: ADMIN_ONLY,
    Action.VIEW_SUMMARY: ADMIN_ONLY,
    Action.LIST_PROPERTIES: ALL_ROLES,
    Action.CREATE_PROPERTY: ALL_ROLES,
    Action.UPDATE_PROPERTY: ALL_ROLES,
    Action.DELETE_PROPERTY: ALL_ROLES,
}

# Actions that additionally require owning the target listing (admins exempt)
OWNERSHIP_ACTIONS: FrozenSet[Action] = frozenset({
    Action.UPDATE_PROPERTY,
    Action.DELETE_PROPERTY,
})

# Listing type forced by the creator's role; None means the creator chooses
ROLE_PROPERTY_TYPE: Dict[UserRole, Optional[PropertyType]] = {
    UserRole.ADMIN: None,
    UserRole.RESIDENTIAL: PropertyType.RESIDENTIAL,
    UserRole.COMMERCIAL: PropertyType.COMMERCIAL,
}

DEFAULT_PROPERTY_TYPE = PropertyType.RESIDENTIAL


def roles_for(action: Action) -> FrozenSet[UserRole]:
    return ACTION_ROLES[action]


def can_act(
    user: Optional[User],
    action: Action,
    resource: Union[Property, User, None] = None
) -> bool:
    """
    Decide whether a user may perform an action, optionally on a resource.

    Args:
        user: Acting user, None for unauthenticated callers
        action: Action being attempted
        resource: Target listing for ownership checks, or target user for deletion

    Returns:
        True if permitted
    """
    if user is None or user.role not in ACTION_ROLES[action]:
        return False

    if action in OWNERSHIP_ACTIONS and isinstance(resource, Property):
        return user.is_admin or resource.is_owned_by(user.id)

    if action == Action.DELETE_USER and isinstance(resource, User):
        return not resource.is_admin

    return True


def can_register_admin(existing_admin_count: int) -> bool:
    """Self-registration of an admin is only open while no admin exists."""
    return existing_admin_count == 0


def can_change_property_type(user: User) -> bool:
    return user.is_admin


def resolve_property_type(user: User, requested: Optional[PropertyType]) -> PropertyType:
    """
    Listing type for a new property created by this user.
    Residential and commercial owners always get their own type; admins pick freely.
    """
    forced = ROLE_PROPERTY_TYPE[user.role]
    if forced is not None:
        return forced
    return requested or DEFAULT_PROPERTY_TYPE
