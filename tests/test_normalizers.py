"""
Tests for field normalization, image reference resolution and lenient query parsing.
"""

import pytest
from decimal import Decimal

from rental_api.services.storage import StoredImage
from rental_api.utils.normalizers import (
    escape_like,
    normalize_features,
    resolve_image_reference,
    resolve_image_references
)
from rental_api.utils.validators import ValidationUtils
from rental_api.utils.exceptions import ValidationError


class TestNormalizeFeatures:

    def test_comma_separated_string(self):
        assert normalize_features("a, b ,,c") == ["a", "b", "c"]

    def test_list_is_trimmed_and_filtered(self):
        assert normalize_features(["x ", "", "y"]) == ["x", "y"]

    def test_order_preserved(self):
        assert normalize_features(["Lift", "Parking", "Gym"]) == ["Lift", "Parking", "Gym"]

    @pytest.mark.parametrize("value", [None, "", [], "  ,  "])
    def test_empty_input(self, value):
        assert normalize_features(value) == []


class TestImageReferences:

    def test_url_kept_verbatim(self):
        stored = StoredImage(path="https://res.cloudinary.com/demo/image/upload/a.jpg", filename="a.jpg")
        assert resolve_image_reference(stored) == "https://res.cloudinary.com/demo/image/upload/a.jpg"

    def test_absolute_path_under_uploads(self):
        stored = StoredImage(path="/srv/app/uploads/abc.png", filename="abc.png")
        assert resolve_image_reference(stored) == "/uploads/abc.png"

    def test_windows_path_under_uploads(self):
        stored = StoredImage(path="C:\\app\\uploads\\abc.png", filename="abc.png")
        assert resolve_image_reference(stored) == "/uploads/abc.png"

    def test_bare_filename(self):
        stored = StoredImage(path="", filename="abc.png")
        assert resolve_image_reference(stored) == "/uploads/abc.png"

    def test_unresolvable_dropped(self):
        stored = [StoredImage(path=""), None, StoredImage(path="/tmp/x.png", filename="x.png")]
        assert resolve_image_references(stored) == ["/uploads/x.png"]


class TestEscapeLike:

    def test_wildcards_escaped(self):
        assert escape_like("50%_off") == "50\\%\\_off"

    def test_plain_text_unchanged(self):
        assert escape_like("Indiranagar") == "Indiranagar"


class TestValidationUtils:

    @pytest.mark.parametrize("page,limit,expected", [
        (None, None, (1, 20)),
        ("3", "20", (3, 20)),
        ("0", "-4", (1, 20)),
        ("abc", "xyz", (1, 20)),
        ("2", "500", (2, 100)),
    ])
    def test_parse_pagination(self, page, limit, expected):
        assert ValidationUtils.parse_pagination(page, limit) == expected

    def test_parse_optional_amount(self):
        assert ValidationUtils.parse_optional_amount("") is None
        assert ValidationUtils.parse_optional_amount(None) is None
        assert ValidationUtils.parse_optional_amount(" 1500.50 ") == Decimal("1500.50")

    def test_parse_optional_amount_rejects_text(self):
        with pytest.raises(ValueError):
            ValidationUtils.parse_optional_amount("lots")

    def test_parse_uuid(self):
        assert ValidationUtils.parse_uuid("not-a-uuid") is None

    def test_validate_uuid_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            ValidationUtils.validate_uuid("nope", "created_by")

        assert exc_info.value.field_errors == [{"field": "created_by", "message": "Invalid created_by"}]
