"""
Spot repository for listing queries with price and coordinate filtering.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, func
from app.repositories.base import BaseRepository
from app.models.spot import Spot
from typing import Optional, List, Tuple
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


class SpotSearchFilters:
    """Data class for spot search filters."""

    def __init__(
        self,
        min_lat: Optional[Decimal] = None,
        max_lat: Optional[Decimal] = None,
        min_lng: Optional[Decimal] = None,
        max_lng: Optional[Decimal] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None
    ):
        self.min_lat = min_lat
        self.max_lat = max_lat
        self.min_lng = min_lng
        self.max_lng = max_lng
        self.min_price = min_price
        self.max_price = max_price


class SpotRepository(BaseRepository[Spot]):
    """Repository for spot listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Spot, db)

    async def search_spots(
        self,
        filters: SpotSearchFilters,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[Spot], int]:
        """
        Search spots with range filters and pagination.

        Args:
            filters: SpotSearchFilters instance with search criteria
            skip: Number of records to skip for pagination
            limit: Maximum number of records to return

        Returns:
            Tuple of (spots list, total count)
        """
        query = select(Spot)
        count_query = select(func.count(Spot.id))

        conditions = self._build_filter_conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))
            count_query = count_query.where(and_(*conditions))

        count_result = await self.db.execute(count_query)
        total_count = count_result.scalar() or 0

        query = query.order_by(Spot.id.asc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        spots = list(result.scalars().all())

        logger.debug(f"Spot search returned {len(spots)} of {total_count} total results")
        return spots, total_count

    def _build_filter_conditions(self, filters: SpotSearchFilters) -> List:
        """
        Build SQLAlchemy filter conditions from search filters.

        Args:
            filters: SpotSearchFilters instance

        Returns:
            List of SQLAlchemy conditions
        """
        conditions = []

        if filters.min_lat is not None:
            conditions.append(Spot.lat >= filters.min_lat)
        if filters.max_lat is not None:
            conditions.append(Spot.lat <= filters.max_lat)

        if filters.min_lng is not None:
            conditions.append(Spot.lng >= filters.min_lng)
        if filters.max_lng is not None:
            conditions.append(Spot.lng <= filters.max_lng)

        if filters.min_price is not None:
            conditions.append(Spot.price >= filters.min_price)
        if filters.max_price is not None:
            conditions.append(Spot.price <= filters.max_price)

        return conditions

    async def get_by_owner(self, owner_id: int) -> List[Spot]:
        """Get every spot owned by a user."""
        query = select(Spot).where(Spot.owner_id == owner_id).order_by(Spot.id.asc())
        result = await self.db.execute(query)
        spots = list(result.scalars().all())
        logger.debug(f"Retrieved {len(spots)} spots for owner {owner_id}")
        return spots
