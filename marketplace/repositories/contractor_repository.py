"""
Contractor repository - data access for ContractorProfile entity.
"""
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_, nulls_last
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.config import settings
from marketplace.models.contractor_profile import ContractorProfile, AVAILABILITY_AVAILABLE
from marketplace.repositories.base import BaseRepository
from marketplace.schemas.contractor import ContractorFilters


class ContractorRepository(BaseRepository[ContractorProfile]):
    def __init__(self):
        super().__init__(ContractorProfile)

    async def get_all(
        self,
        db: AsyncSession,
    ) -> List[ContractorProfile]:
        """
        Every contractor profile, for job matching.

        Full scan: matching runs in Python over the whole table. Fine at
        marketplace scale; a larger catalogue would pre-filter on
        service_areas/specialties overlap in SQL first.
        """
        result = await db.execute(select(ContractorProfile))
        return list(result.scalars().all())

    async def get_by_user_id(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Optional[ContractorProfile]:
        """Find a contractor profile by its owner's user id."""
        result = await db.execute(
            select(ContractorProfile).where(ContractorProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def find_with_filters(
        self,
        db: AsyncSession,
        filters: ContractorFilters,
        *,
        now: datetime,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ContractorProfile], int]:
        """Filtered, sorted, paginated listing plus total count."""
        rating = func.coalesce(ContractorProfile.average_rating, settings.default_contractor_rating)
        query = select(ContractorProfile)

        if filters.search and filters.search.strip():
            term = f"%{filters.search.strip()}%"
            query = query.where(
                or_(
                    ContractorProfile.full_name.ilike(term),
                    ContractorProfile.bio.ilike(term),
                )
            )

        if filters.services:
            query = query.where(ContractorProfile.specialties.overlap(filters.services))

        if filters.locations:
            query = query.where(ContractorProfile.service_areas.overlap(filters.locations))

        if filters.min_rating is not None:
            query = query.where(rating >= filters.min_rating)

        if filters.available_now:
            # Coarse SQL pre-filter; working hours are evaluated per row by the service
            query = query.where(
                ContractorProfile.availability_status == AVAILABILITY_AVAILABLE,
                or_(
                    ContractorProfile.busy_until.is_(None),
                    ContractorProfile.busy_until < now,
                ),
            )

        # Count
        count_query = select(func.count()).select_from(query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar() or 0

        # Sort
        sort_column = {
            "rating": rating,
            "name": ContractorProfile.full_name,
            "experience": ContractorProfile.years_experience,
        }[filters.sort_by]
        ordered = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()
        query = query.order_by(nulls_last(ordered), ContractorProfile.id)

        # Paginate
        query = query.offset((page - 1) * limit).limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def get_distinct_specialties(
        self,
        db: AsyncSession,
    ) -> List[str]:
        """Every specialty used by at least one contractor, sorted."""
        value = func.unnest(ContractorProfile.specialties).label("value")
        result = await db.execute(select(value).distinct().order_by(value))
        return [row for row in result.scalars().all() if row]

    async def get_distinct_service_areas(
        self,
        db: AsyncSession,
    ) -> List[str]:
        """Every service area covered by at least one contractor, sorted."""
        value = func.unnest(ContractorProfile.service_areas).label("value")
        result = await db.execute(select(value).distinct().order_by(value))
        return [row for row in result.scalars().all() if row]
