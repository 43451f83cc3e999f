"""
Property service for managing property listings with business logic validation.
Handles CRUD operations, ownership checks, visibility scoping and the admin summary.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple
from datetime import datetime, timezone
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import UploadFile
from rental_api.config import settings
from rental_api.repositories.property import PropertyRepository, PropertyFilters
from rental_api.models.property import Property, PropertyType
from rental_api.models.user import User
from rental_api.schemas.property import PropertyCreate, PropertyUpdate
from rental_api.services.policy import (
    Action,
    can_act,
    can_change_property_type,
    resolve_property_type
)
from rental_api.services.storage import ImageStorage, StoredImage
from rental_api.utils.exceptions import (
    FileUploadError,
    ForbiddenError,
    PropertyNotFoundError,
    PropertyOwnershipError,
    ValidationError
)
from rental_api.utils.normalizers import resolve_image_references
from rental_api.utils.validators import ValidationUtils
import math
import logging

logger = logging.getLogger(__name__)

# Columns that cannot be cleared by an update
REQUIRED_FIELDS = ("title", "location", "area", "rent", "property_type")


def parse_property_type(value: Optional[str]) -> Optional[PropertyType]:
    """Exact listing type value, anything else is ignored."""
    for property_type in PropertyType:
        if value == property_type.value:
            return property_type
    return None


def build_listing_filters(
    user: User,
    property_type: Optional[str] = None,
    area: Optional[str] = None,
    search: Optional[str] = None,
    created_by: Optional[str] = None
) -> PropertyFilters:
    """
    Turn raw query parameters into filters scoped to what the caller may see.

    Admins may filter by creator; everyone else only ever sees their own listings,
    whatever created_by they send.

    Raises:
        ValidationError: If an admin sends a malformed created_by
    """
    if user.is_admin:
        created_by_id = ValidationUtils.validate_uuid(created_by, "created_by") if created_by else None
    else:
        created_by_id = user.id

    return PropertyFilters(
        property_type=parse_property_type(property_type),
        area=area.strip() if area and area.strip() else None,
        search=search.strip() if search and search.strip() else None,
        created_by_id=created_by_id,
    )


def start_of_local_day(now: Optional[datetime] = None) -> datetime:
    """Server-local midnight of the current day, as an aware UTC datetime."""
    local_now = (now or datetime.now(timezone.utc)).astimezone()
    midnight = local_now.replace(hour=0, minute=0, second=0, microsecond=0)
    return midnight.astimezone(timezone.utc)


class PropertyService:
    """
    Property service for managing listings.
    Images are written through the injected storage backend before the row is created.
    """

    def __init__(self, db_session: AsyncSession, storage: Optional[ImageStorage] = None):
        self.db = db_session
        self.storage = storage
        self.property_repo = PropertyRepository(db_session)

    async def _store_images(self, files: Sequence[UploadFile]) -> List[StoredImage]:
        if not files:
            return []
        if self.storage is None:
            raise FileUploadError("Image storage is not available")

        return await self.storage.store_uploads(files)

    async def _discard_images(self, stored: Sequence[StoredImage]) -> None:
        if stored and self.storage is not None:
            await self.storage.discard(stored)

    async def _persist(self, stored: Sequence[StoredImage], operation: Callable[[], Awaitable[Property]]) -> Property:
        """
        Run a repository write; the images stored for it are removed if the write fails.

        Raises:
            ValidationError: If the listing fails model validation
        """
        try:
            return await operation()
        except ValueError as e:
            await self._discard_images(stored)
            raise ValidationError(str(e))
        except SQLAlchemyError:
            await self._discard_images(stored)
            raise

    async def create_property(
        self,
        property_data: PropertyCreate,
        current_user: User,
        files: Sequence[UploadFile] = ()
    ) -> Property:
        """
        Create a new listing owned by the current user.

        Args:
            property_data: Validated listing fields
            current_user: User creating the property
            files: Uploaded images, at least one required

        Returns:
            Created property with its creator loaded

        Raises:
            ForbiddenError: If the user's role may not create listings
            FileUploadError: If no image was supplied or an image is rejected
        """
        if not can_act(current_user, Action.CREATE_PROPERTY):
            raise ForbiddenError()

        if not files:
            raise FileUploadError("At least one image is required")

        stored = await self._store_images(files)
        images = resolve_image_references(stored)
        if not images:
            await self._discard_images(stored)
            raise FileUploadError("At least one image is required")

        data = property_data.model_dump(exclude={"property_type"})
        data.update({
            "property_type": resolve_property_type(current_user, property_data.property_type),
            "images": images,
            "created_by_id": current_user.id,
        })

        created = await self._persist(stored, lambda: self.property_repo.create_property(data))

        logger.info(f"User {current_user.email} created property {created.id} ({created.property_type.value})")
        return created

    async def get_property(self, property_id: str) -> Property:
        """
        Get a listing by id; viewing a single listing is public.

        Raises:
            PropertyNotFoundError: If the id is malformed or unknown
        """
        pid = ValidationUtils.parse_uuid(property_id)
        property_obj = await self.property_repo.get_with_owner(pid) if pid else None

        if property_obj is None:
            raise PropertyNotFoundError(property_id)

        return property_obj

    async def list_properties(
        self,
        current_user: User,
        property_type: Optional[str] = None,
        area: Optional[str] = None,
        search: Optional[str] = None,
        created_by: Optional[str] = None,
        page: Any = None,
        limit: Any = None
    ) -> Tuple[List[Property], Dict[str, int]]:
        """
        Scoped, filtered page of listings.

        Returns:
            Tuple of (properties, pagination dict with total/page/pages/limit)
        """
        filters = build_listing_filters(current_user, property_type, area, search, created_by)
        page_number, page_size = ValidationUtils.parse_pagination(
            page,
            limit,
            default_limit=settings.default_page_size,
            max_limit=settings.max_page_size
        )

        items, total = await self.property_repo.search(
            filters,
            skip=(page_number - 1) * page_size,
            limit=page_size
        )

        pagination = {
            "total": total,
            "page": page_number,
            "pages": math.ceil(total / page_size) if total else 0,
            "limit": page_size,
        }
        return items, pagination

    async def update_property(
        self,
        property_id: str,
        patch: PropertyUpdate,
        current_user: User,
        files: Sequence[UploadFile] = ()
    ) -> Property:
        """
        Update a listing the current user owns (or any listing for admins).

        A type change from a non-admin is dropped without error. New uploads
        replace the image list only when at least one of them resolves.

        Raises:
            PropertyNotFoundError: If the listing does not exist
            PropertyOwnershipError: If the user does not own the listing
        """
        property_obj = await self.get_property(property_id)

        if not can_act(current_user, Action.UPDATE_PROPERTY, property_obj):
            logger.warning(f"User {current_user.email} tried to edit property {property_obj.id}")
            raise PropertyOwnershipError("edit")

        changes = patch.model_dump(exclude_unset=True)

        if "property_type" in changes and not can_change_property_type(current_user):
            changes.pop("property_type")

        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                changes.pop(field)

        stored = await self._store_images(files)
        images = resolve_image_references(stored)
        if images:
            changes["images"] = images
        else:
            await self._discard_images(stored)
            stored = []

        return await self._persist(stored, lambda: self.property_repo.apply_patch(property_obj, changes))

    async def delete_property(self, property_id: str, current_user: User) -> None:
        """
        Delete a listing the current user owns (or any listing for admins).

        Raises:
            PropertyNotFoundError: If the listing does not exist
            PropertyOwnershipError: If the user does not own the listing
        """
        property_obj = await self.get_property(property_id)

        if not can_act(current_user, Action.DELETE_PROPERTY, property_obj):
            logger.warning(f"User {current_user.email} tried to delete property {property_obj.id}")
            raise PropertyOwnershipError("delete")

        await self.property_repo.delete_property(property_obj)

    async def get_summary(self, now: Optional[datetime] = None) -> Dict[str, int]:
        """Dashboard counts: total, created today, residential and commercial."""
        return await self.property_repo.summary(start_of_local_day(now))
