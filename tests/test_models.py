"""
Tests for database models.
Tests model validation, password handling and serialization.
"""

import pytest
import uuid
from decimal import Decimal

from rental_api.models.user import User, UserRole
from rental_api.models.property import Property, PropertyType
from tests.conftest import PropertyFactory


class TestUserModel:
    """Test User model validation and methods."""

    def test_email_normalized_to_lower_case(self):
        assert User.normalize_email("  Owner@Example.COM ") == "owner@example.com"

    def test_email_validation_invalid(self):
        """Test invalid email validation."""
        for email in ["invalid-email", "@example.com", "test@"]:
            with pytest.raises(ValueError, match="Invalid email format"):
                User.normalize_email(email)

    def test_password_hashing(self):
        """Test password hashing functionality."""
        hashed = User.hash_password("secret123")

        assert hashed != "secret123"
        assert hashed.startswith("$2b$")

    def test_short_password_rejected(self):
        with pytest.raises(ValueError, match="at least 6 characters"):
            User.hash_password("12345")

    def test_password_verification(self):
        """Test password verification."""
        user = User(
            name="Owner",
            email="owner@example.com",
            hashed_password=User.hash_password("secret123"),
            role=UserRole.RESIDENTIAL
        )

        assert user.verify_password("secret123") is True
        assert user.verify_password("wrong-password") is False

    def test_to_dict_never_exposes_password_hash(self):
        user = User(
            id=uuid.uuid4(),
            name="Owner",
            email="owner@example.com",
            hashed_password=User.hash_password("secret123"),
            role=UserRole.COMMERCIAL
        )

        data = user.to_dict()

        assert "hashed_password" not in data
        assert "password" not in data
        assert data["role"] == "commercial"
        assert data["id"] == str(user.id)

    def test_is_admin(self):
        assert User(role=UserRole.ADMIN).is_admin is True
        assert User(role=UserRole.RESIDENTIAL).is_admin is False


class TestPropertyModel:
    """Test Property model validation and methods."""

    def _build(self, **overrides) -> Property:
        data = PropertyFactory.create_property_data(created_by_id=uuid.uuid4())
        data.update(overrides)
        return Property(**data)

    def test_valid_property_passes(self):
        self._build().validate_all()

    def test_negative_rent_rejected(self):
        with pytest.raises(ValueError, match="Rent"):
            self._build(rent=Decimal("-1")).validate_all()

    def test_negative_deposit_rejected(self):
        with pytest.raises(ValueError, match="Deposit"):
            self._build(deposit=Decimal("-5")).validate_all()

    def test_zero_rent_is_allowed(self):
        self._build(rent=Decimal("0")).validate_amounts()

    def test_images_required(self):
        with pytest.raises(ValueError, match="At least one image is required"):
            self._build(images=[]).validate_all()

    def test_is_owned_by(self):
        owner_id = uuid.uuid4()
        property_obj = self._build(created_by_id=owner_id)

        assert property_obj.is_owned_by(owner_id) is True
        assert property_obj.is_owned_by(uuid.uuid4()) is False

    def test_to_dict_shape(self):
        owner = User(
            id=uuid.uuid4(),
            name="Owner",
            email="owner@example.com",
            role=UserRole.RESIDENTIAL
        )
        property_obj = self._build(
            id=uuid.uuid4(),
            created_by_id=owner.id,
            deposit=Decimal("50000.00"),
            property_type=PropertyType.COMMERCIAL
        )
        property_obj.created_by = owner

        data = property_obj.to_dict()

        assert data["type"] == "commercial"
        assert data["rent"] == 25000.0
        assert data["deposit"] == 50000.0
        assert data["created_by"] == {
            "id": str(owner.id),
            "name": "Owner",
            "email": "owner@example.com",
            "role": "residential",
        }

    def test_to_dict_without_deposit(self):
        data = self._build(id=uuid.uuid4()).to_dict()

        assert data["deposit"] is None
        assert data["created_by"] is None
