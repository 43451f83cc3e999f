"""
Property repository for listing storage, filtered browsing and dashboard counts.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func, case, desc
from sqlalchemy.orm import selectinload
from rental_api.repositories.base import BaseRepository
from rental_api.models.property import Property, PropertyType
from rental_api.utils.normalizers import escape_like
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from dataclasses import dataclass
import uuid
import logging

logger = logging.getLogger(__name__)


@dataclass
class PropertyFilters:
    """Listing filters after visibility scoping has been applied."""
    property_type: Optional[PropertyType] = None
    area: Optional[str] = None
    search: Optional[str] = None
    created_by_id: Optional[uuid.UUID] = None


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for property listings.
    Every read eagerly loads the creator so responses can embed it.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property with validation.

        Args:
            property_data: Dictionary containing property information

        Returns:
            Created property with its creator loaded

        Raises:
            ValueError: If validation fails
        """
        property_obj = Property(**property_data)
        property_obj.validate_all()

        created_property = await self.create(property_data)
        logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
        return await self.get_with_owner(created_property.id)

    async def get_with_owner(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get a property with its creator loaded.

        Returns:
            Property or None if not found
        """
        query = (
            select(Property)
            .options(selectinload(Property.created_by))
            .where(Property.id == property_id)
            .execution_options(populate_existing=True)
        )

        result = await self.db.execute(query)
        property_obj = result.scalar_one_or_none()

        if property_obj is None:
            logger.debug(f"Property {property_id} not found")

        return property_obj

    async def search(
        self,
        filters: PropertyFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Property], int]:
        """
        Filtered page of listings, newest first.

        Args:
            filters: PropertyFilters instance
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (properties list, total count)
        """
        conditions = self._build_filter_conditions(filters)

        count_query = select(func.count(Property.id))
        query = select(Property).options(selectinload(Property.created_by))

        if conditions:
            count_query = count_query.where(and_(*conditions))
            query = query.where(and_(*conditions))

        count_result = await self.db.execute(count_query)
        total_count = count_result.scalar() or 0

        query = (
            query
            .order_by(desc(Property.created_at), desc(Property.id))
            .offset(skip)
            .limit(limit)
        )

        result = await self.db.execute(query)
        properties = list(result.scalars().all())

        logger.debug(f"Property search returned {len(properties)} of {total_count} total results")
        return properties, total_count

    def _build_filter_conditions(self, filters: PropertyFilters) -> List:
        """
        Build SQLAlchemy filter conditions from listing filters.

        Args:
            filters: PropertyFilters instance

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        if filters.property_type is not None:
            conditions.append(Property.property_type == filters.property_type)

        # Area filter (case-insensitive substring)
        if filters.area:
            conditions.append(Property.area.ilike(f"%{escape_like(filters.area)}%", escape="\\"))

        # Search over title, location and area
        if filters.search:
            search_term = f"%{escape_like(filters.search)}%"
            conditions.append(
                or_(
                    Property.title.ilike(search_term, escape="\\"),
                    Property.location.ilike(search_term, escape="\\"),
                    Property.area.ilike(search_term, escape="\\")
                )
            )

        if filters.created_by_id is not None:
            conditions.append(Property.created_by_id == filters.created_by_id)

        return conditions

    async def apply_patch(self, property_obj: Property, patch: Dict[str, Any]) -> Property:
        """
        Apply an allow-listed patch and return the refreshed listing.

        Raises:
            ValueError: If the patched listing fails validation
        """
        # Validated on a detached copy so a rejected patch leaves the session untouched
        candidate = Property(
            rent=patch.get("rent", property_obj.rent),
            deposit=patch.get("deposit", property_obj.deposit),
            images=patch.get("images", property_obj.images)
        )
        candidate.validate_all()

        await self.update(property_obj, patch)
        logger.info(f"Updated property {property_obj.id} fields: {', '.join(sorted(patch)) or 'none'}")
        return await self.get_with_owner(property_obj.id)

    async def delete_property(self, property_obj: Property) -> None:
        await self.delete(property_obj)
        logger.info(f"Deleted property {property_obj.id}")

    async def summary(self, since: datetime) -> Dict[str, int]:
        """
        Dashboard counts in one aggregate query.

        Args:
            since: Listings created at or after this instant count as "today"

        Returns:
            Dictionary with total, today, residential and commercial counts
        """
        query = select(
            func.count(Property.id),
            func.count(case((Property.created_at >= since, Property.id))),
            func.count(case((Property.property_type == PropertyType.RESIDENTIAL, Property.id))),
            func.count(case((Property.property_type == PropertyType.COMMERCIAL, Property.id))),
        )

        result = await self.db.execute(query)
        total, today, residential, commercial = result.one()

        return {
            "total": total or 0,
            "today": today or 0,
            "residential": residential or 0,
            "commercial": commercial or 0,
        }
