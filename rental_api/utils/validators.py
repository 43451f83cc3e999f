"""
Validation and normalization helpers for the Rental Listing API.
Provides lenient query parsing, amount coercion and pydantic error conversion.
"""

import uuid
from typing import Any, Dict, List, Optional, Tuple
from decimal import Decimal, InvalidOperation
from pydantic import ValidationError as PydanticValidationError

from rental_api.utils.exceptions import ValidationError

# Location prefixes FastAPI adds to error paths
REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


class ValidationUtils:
    """
    Utility class for common validation operations.
    """

    @staticmethod
    def validate_uuid(value: Any, field_name: str = "id") -> uuid.UUID:
        """
        Validate UUID format.

        Raises:
            ValidationError: If the value is not a UUID
        """
        try:
            return uuid.UUID(str(value).strip())
        except (ValueError, AttributeError, TypeError):
            raise ValidationError.for_field(field_name, f"Invalid {field_name}")

    @staticmethod
    def parse_uuid(value: Any) -> Optional[uuid.UUID]:
        """Parse a path identifier; malformed input yields None so lookups report not found."""
        try:
            return uuid.UUID(str(value).strip())
        except (ValueError, AttributeError, TypeError):
            return None

    @staticmethod
    def parse_positive_int(value: Any, default: int) -> int:
        """
        Parse a positive integer from raw query input.
        Absent, unparseable or non-positive input falls back to the default.
        """
        if value is None or value == "":
            return default
        try:
            parsed = int(str(value).strip())
        except (TypeError, ValueError):
            return default
        return parsed if parsed >= 1 else default

    @staticmethod
    def parse_pagination(
        page: Any,
        limit: Any,
        default_limit: int = 20,
        max_limit: int = 100
    ) -> Tuple[int, int]:
        """
        Parse pagination parameters leniently.

        Returns:
            Tuple of (page, limit) with page >= 1 and 1 <= limit <= max_limit
        """
        parsed_page = ValidationUtils.parse_positive_int(page, 1)
        parsed_limit = ValidationUtils.parse_positive_int(limit, default_limit)
        return parsed_page, min(parsed_limit, max_limit)

    @staticmethod
    def parse_optional_amount(value: Any) -> Optional[Decimal]:
        """
        Coerce an optional amount; empty input means "not set", never zero.

        Raises:
            ValueError: If the value is present but not numeric
        """
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                return None
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValueError("must be a number")
        if not amount.is_finite():
            raise ValueError("must be a number")
        return amount


def handle_pydantic_validation_error(exc: PydanticValidationError) -> ValidationError:
    """
    Convert Pydantic validation error to custom ValidationError.
    """
    field_errors: List[Dict[str, str]] = []

    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"] if loc not in REQUEST_LOCATIONS)
        field_errors.append({
            "field": field_path,
            "message": error["msg"],
        })

    return ValidationError(
        detail="Request validation failed",
        field_errors=field_errors
    )
