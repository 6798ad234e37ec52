"""
Contractor routes - listing, filter options and availability.
"""
from typing import Optional, List, Literal
from uuid import UUID
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.deps import get_contractor_service
from marketplace.core.database import get_db
from marketplace.core.rate_limit import limiter, RATE_DEFAULT
from marketplace.schemas.base import PaginatedResponse
from marketplace.schemas.contractor import (
    AvailabilityResponse,
    AvailabilityUpdate,
    ContractorFilters,
    ContractorListItem,
    FilterOptions,
)
from marketplace.services.contractor_service import ContractorService

router = APIRouter(prefix="/contractors", tags=["contractors"])


@router.get("", response_model=PaginatedResponse[ContractorListItem])
@limiter.limit(RATE_DEFAULT)
async def list_contractors(
    request: Request,
    search: Optional[str] = Query(None, description="Matches name or bio"),
    services: Optional[List[str]] = Query(None, description="Any of these specialties"),
    locations: Optional[List[str]] = Query(None, description="Any of these service areas"),
    min_rating: Optional[float] = Query(None, ge=0, le=5),
    available_now: bool = Query(False),
    sort_by: Literal["rating", "name", "experience"] = Query("rating"),
    sort_order: Literal["asc", "desc"] = Query("desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    service: ContractorService = Depends(get_contractor_service),
):
    """List contractors with filters. Each card carries live availability."""
    filters = ContractorFilters(
        search=search,
        services=services or [],
        locations=locations or [],
        min_rating=min_rating,
        available_now=available_now,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return await service.list_contractors(db, filters, page=page, limit=limit)


@router.get("/filter-options", response_model=FilterOptions)
@limiter.limit(RATE_DEFAULT)
async def get_filter_options(
    request: Request,
    db: AsyncSession = Depends(get_db),
    service: ContractorService = Depends(get_contractor_service),
):
    """Distinct services and locations for the listing filters."""
    return await service.get_filter_options(db)


@router.get("/{contractor_id}/availability", response_model=AvailabilityResponse)
async def get_availability(
    contractor_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: ContractorService = Depends(get_contractor_service),
):
    return await service.get_availability(db, contractor_id)


@router.patch("/{contractor_id}/availability", response_model=AvailabilityResponse)
async def update_availability(
    contractor_id: UUID,
    update: AvailabilityUpdate,
    db: AsyncSession = Depends(get_db),
    service: ContractorService = Depends(get_contractor_service),
):
    """Update status, message, busy period or working hours."""
    return await service.update_availability(db, contractor_id, update)
