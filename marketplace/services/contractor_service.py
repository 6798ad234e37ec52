"""
Contractor service - listing, filter options and availability.

Listing results are cached in an injected TTLCache. Profile data is cached;
`is_currently_available` depends on the clock, so it is recomputed on every
read, cached or not.
"""
from datetime import datetime, timezone
from typing import Optional, Tuple, List
from uuid import UUID
from zoneinfo import ZoneInfo

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.core.cache import TTLCache
from marketplace.core.config import settings
from marketplace.core.exceptions import ContractorNotFoundException
from marketplace.core.logging import get_logger
from marketplace.matching.availability import coerce_working_hours, is_currently_available
from marketplace.models.contractor_profile import ContractorProfile, AVAILABILITY_AVAILABLE
from marketplace.repositories.contractor_repository import ContractorRepository
from marketplace.schemas.base import PaginatedResponse
from marketplace.schemas.contractor import (
    AvailabilityResponse,
    AvailabilityUpdate,
    ContractorFilters,
    ContractorListItem,
    FilterOptions,
    WorkingHours,
)

logger = get_logger(__name__)

DEFAULT_SPECIALTY = "General Services"


class ContractorService:
    """Handles contractor listing and availability."""

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        *,
        contractor_repo: Optional[ContractorRepository] = None,
        schedule_timezone: Optional[str] = None,
    ):
        self.cache = cache if cache is not None else TTLCache(
            ttl_seconds=settings.contractor_cache_ttl_seconds,
            max_entries=settings.contractor_cache_max_entries,
        )
        self.contractor_repo = contractor_repo or ContractorRepository()
        self.tz = ZoneInfo(schedule_timezone or settings.schedule_timezone)

    async def list_contractors(
        self,
        db: AsyncSession,
        filters: ContractorFilters,
        *,
        page: int = 1,
        limit: int = 20,
        now: Optional[datetime] = None,
    ) -> PaginatedResponse[ContractorListItem]:
        """Filtered, paginated contractor cards with live availability."""
        now = now or datetime.now(timezone.utc)
        key = TTLCache.make_key("contractors", page=page, limit=limit, **filters.model_dump())
        # The available_now pre-filter depends on `now`; its membership and total
        # change as busy_until passes, so those pages are never cached
        cacheable = not filters.available_now

        cached: Optional[Tuple[List[ContractorListItem], int]] = self.cache.get(key) if cacheable else None
        if cached is None:
            rows, total = await self.contractor_repo.find_with_filters(
                db, filters, now=now, page=page, limit=limit
            )
            cached = ([self._to_list_item(row) for row in rows], total)
            if cacheable:
                self.cache.set(key, cached)
            logger.debug("contractor_listing_cache_miss", total=total, page=page, cached=cacheable)

        items, total = cached
        return PaginatedResponse(
            items=[
                item.model_copy(update={"is_currently_available": self._resolve(item, now)})
                for item in items
            ],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    async def get_filter_options(self, db: AsyncSession) -> FilterOptions:
        """Sorted distinct services and locations across all contractors."""
        key = TTLCache.make_key("filter_options")
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        options = FilterOptions(
            services=await self.contractor_repo.get_distinct_specialties(db),
            locations=await self.contractor_repo.get_distinct_service_areas(db),
        )
        self.cache.set(key, options)
        return options

    async def get_availability(
        self,
        db: AsyncSession,
        contractor_id: UUID,
        *,
        now: Optional[datetime] = None,
    ) -> AvailabilityResponse:
        contractor = await self._get_contractor(db, contractor_id)
        return self._to_availability(contractor, now or datetime.now(timezone.utc))

    async def update_availability(
        self,
        db: AsyncSession,
        contractor_id: UUID,
        update: AvailabilityUpdate,
        *,
        now: Optional[datetime] = None,
    ) -> AvailabilityResponse:
        """
        Apply the fields set on `update` and invalidate cached listings.

        Explicit nulls clear a field (e.g. "busy_until": null ends a busy
        period).
        """
        now = now or datetime.now(timezone.utc)
        contractor = await self._get_contractor(db, contractor_id)

        changes = update.model_dump(exclude_unset=True)
        if "working_hours" in changes and update.working_hours is not None:
            changes["working_hours"] = update.working_hours.model_dump(exclude_none=True)
        if changes.get("availability_status", "") is None:
            changes["availability_status"] = AVAILABILITY_AVAILABLE

        for field_name, value in changes.items():
            setattr(contractor, field_name, value)
        contractor.availability_updated_at = now

        await db.commit()
        self.cache.clear()

        logger.info(
            "contractor_availability_updated",
            contractor_id=str(contractor_id),
            fields=sorted(changes),
        )
        return self._to_availability(contractor, now)

    async def _get_contractor(self, db: AsyncSession, contractor_id: UUID) -> ContractorProfile:
        contractor = await self.contractor_repo.get_by_id(db, contractor_id)
        if not contractor:
            raise ContractorNotFoundException()
        return contractor

    def _working_hours(self, contractor) -> Optional[WorkingHours]:
        try:
            return coerce_working_hours(contractor.working_hours)
        except ValidationError:
            logger.warning("invalid_working_hours", contractor_id=str(contractor.id))
            return None

    def _resolve(self, subject, now: datetime) -> bool:
        return is_currently_available(subject, now, self.tz)

    def _to_list_item(self, contractor: ContractorProfile) -> ContractorListItem:
        specialties = list(contractor.specialties or [])
        rating = contractor.average_rating
        return ContractorListItem(
            id=contractor.id,
            user_id=contractor.user_id,
            full_name=contractor.full_name,
            bio=contractor.bio,
            specialties=specialties,
            service_areas=list(contractor.service_areas or []),
            primary_specialty=specialties[0] if specialties else DEFAULT_SPECIALTY,
            average_rating=float(rating) if rating is not None else settings.default_contractor_rating,
            years_experience=contractor.years_experience,
            profile_picture_url=contractor.profile_picture_url,
            availability_status=contractor.availability_status or AVAILABILITY_AVAILABLE,
            availability_message=contractor.availability_message,
            busy_until=contractor.busy_until,
            working_hours=self._working_hours(contractor),
            is_currently_available=False,
        )

    def _to_availability(self, contractor: ContractorProfile, now: datetime) -> AvailabilityResponse:
        working_hours = self._working_hours(contractor)
        response = AvailabilityResponse(
            contractor_id=contractor.id,
            availability_status=contractor.availability_status or AVAILABILITY_AVAILABLE,
            availability_message=contractor.availability_message,
            busy_until=contractor.busy_until,
            working_hours=working_hours,
            is_currently_available=False,
            evaluated_at=now,
        )
        response.is_currently_available = self._resolve(response, now)
        return response
