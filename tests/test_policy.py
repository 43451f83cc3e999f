"""
Tests for the authorization policy.
"""

import uuid

from rental_api.models.property import Property, PropertyType
from rental_api.models.user import User, UserRole
from rental_api.services.policy import (
    Action,
    can_act,
    can_change_property_type,
    can_register_admin,
    resolve_property_type,
    roles_for
)


def _user(role: UserRole) -> User:
    return User(id=uuid.uuid4(), name=role.value, email=f"{role.value}@example.com", role=role)


def _listing(owner: User) -> Property:
    return Property(id=uuid.uuid4(), created_by_id=owner.id, property_type=PropertyType.RESIDENTIAL)


class TestRoleGates:

    def test_admin_only_actions(self):
        admin = _user(UserRole.ADMIN)
        for action in (Action.LIST_USERS, Action.CREATE_USER, Action.UPDATE_USER, Action.VIEW_SUMMARY):
            assert can_act(admin, action) is True
            assert can_act(_user(UserRole.RESIDENTIAL), action) is False
            assert can_act(_user(UserRole.COMMERCIAL), action) is False

    def test_every_role_may_list_and_create(self):
        for role in UserRole:
            assert can_act(_user(role), Action.LIST_PROPERTIES) is True
            assert can_act(_user(role), Action.CREATE_PROPERTY) is True

    def test_anonymous_is_refused(self):
        assert can_act(None, Action.LIST_PROPERTIES) is False

    def test_roles_for(self):
        assert roles_for(Action.VIEW_SUMMARY) == frozenset({UserRole.ADMIN})
        assert roles_for(Action.DELETE_PROPERTY) == frozenset(UserRole)


class TestOwnership:

    def test_owner_may_edit_and_delete(self):
        owner = _user(UserRole.RESIDENTIAL)
        listing = _listing(owner)

        assert can_act(owner, Action.UPDATE_PROPERTY, listing) is True
        assert can_act(owner, Action.DELETE_PROPERTY, listing) is True

    def test_other_owner_refused(self):
        listing = _listing(_user(UserRole.RESIDENTIAL))
        stranger = _user(UserRole.COMMERCIAL)

        assert can_act(stranger, Action.UPDATE_PROPERTY, listing) is False
        assert can_act(stranger, Action.DELETE_PROPERTY, listing) is False

    def test_admin_may_touch_any_listing(self):
        listing = _listing(_user(UserRole.COMMERCIAL))

        assert can_act(_user(UserRole.ADMIN), Action.UPDATE_PROPERTY, listing) is True
        assert can_act(_user(UserRole.ADMIN), Action.DELETE_PROPERTY, listing) is True

    def test_admin_accounts_cannot_be_deleted(self):
        admin = _user(UserRole.ADMIN)

        assert can_act(admin, Action.DELETE_USER, _user(UserRole.ADMIN)) is False
        assert can_act(admin, Action.DELETE_USER, _user(UserRole.RESIDENTIAL)) is True

    def test_ownership_follows_model_helpers(self, monkeypatch):
        listing = _listing(_user(UserRole.RESIDENTIAL))
        stranger = _user(UserRole.COMMERCIAL)

        monkeypatch.setattr(Property, "is_owned_by", lambda self, user_id: True)
        assert can_act(stranger, Action.UPDATE_PROPERTY, listing) is True

        monkeypatch.setattr(Property, "is_owned_by", lambda self, user_id: False)
        monkeypatch.setattr(User, "is_admin", property(lambda self: True))
        assert can_act(stranger, Action.DELETE_PROPERTY, listing) is True
        assert can_change_property_type(stranger) is True


class TestPropertyType:

    def test_register_admin_only_when_none_exists(self):
        assert can_register_admin(0) is True
        assert can_register_admin(1) is False

    def test_owners_get_their_own_type(self):
        assert resolve_property_type(_user(UserRole.RESIDENTIAL), PropertyType.COMMERCIAL) == PropertyType.RESIDENTIAL
        assert resolve_property_type(_user(UserRole.COMMERCIAL), PropertyType.RESIDENTIAL) == PropertyType.COMMERCIAL
        assert resolve_property_type(_user(UserRole.COMMERCIAL), None) == PropertyType.COMMERCIAL

    def test_admin_chooses_type(self):
        admin = _user(UserRole.ADMIN)

        assert resolve_property_type(admin, PropertyType.COMMERCIAL) == PropertyType.COMMERCIAL
        assert resolve_property_type(admin, None) == PropertyType.RESIDENTIAL

    def test_only_admin_changes_type(self):
        assert can_change_property_type(_user(UserRole.ADMIN)) is True
        assert can_change_property_type(_user(UserRole.RESIDENTIAL)) is False
