"""
Contractor schemas, including the typed weekly working-hours structure.
"""
from datetime import datetime
from typing import Literal, Optional, List
from uuid import UUID
from pydantic import ConfigDict, Field

from marketplace.schemas.base import BaseSchema, IDSchema


WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Zero-padded 24h clock. Availability compares these as strings.
CLOCK_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

AvailabilityStatus = Literal["available", "busy", "offline"]


class DaySchedule(BaseSchema):
    """One weekday of a contractor's schedule."""

    enabled: bool = True
    start: Optional[str] = Field(None, pattern=CLOCK_PATTERN)
    end: Optional[str] = Field(None, pattern=CLOCK_PATTERN)


class WorkingHours(BaseSchema):
    """
    Weekly schedule keyed by lower-case English weekday name.

    A missing day places no constraint on that day.
    """

    model_config = ConfigDict(extra="forbid")

    monday: Optional[DaySchedule] = None
    tuesday: Optional[DaySchedule] = None
    wednesday: Optional[DaySchedule] = None
    thursday: Optional[DaySchedule] = None
    friday: Optional[DaySchedule] = None
    saturday: Optional[DaySchedule] = None
    sunday: Optional[DaySchedule] = None

    def for_day(self, weekday: str) -> Optional[DaySchedule]:
        return getattr(self, weekday, None)


class ContractorListItem(IDSchema):
    """Contractor card for listings, with live availability."""

    user_id: UUID
    full_name: Optional[str] = None
    bio: Optional[str] = None
    specialties: List[str] = []
    service_areas: List[str] = []
    primary_specialty: str
    average_rating: float
    years_experience: Optional[int] = None
    profile_picture_url: Optional[str] = None
    availability_status: AvailabilityStatus = "available"
    availability_message: Optional[str] = None
    busy_until: Optional[datetime] = None
    working_hours: Optional[WorkingHours] = None
    is_currently_available: bool


class ContractorFilters(BaseSchema):
    """Listing filters."""

    search: Optional[str] = None
    services: List[str] = []
    locations: List[str] = []
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    available_now: bool = False
    sort_by: Literal["rating", "name", "experience"] = "rating"
    sort_order: Literal["asc", "desc"] = "desc"


class AvailabilityResponse(BaseSchema):
    """Current availability of one contractor."""

    contractor_id: UUID
    availability_status: AvailabilityStatus
    availability_message: Optional[str] = None
    busy_until: Optional[datetime] = None
    working_hours: Optional[WorkingHours] = None
    is_currently_available: bool
    evaluated_at: datetime


class AvailabilityUpdate(BaseSchema):
    """Partial availability update. Only fields that are set are applied."""

    availability_status: Optional[AvailabilityStatus] = None
    availability_message: Optional[str] = None
    busy_until: Optional[datetime] = None
    working_hours: Optional[WorkingHours] = None


class FilterOptions(BaseSchema):
    """Distinct values available for listing filters."""

    services: List[str]
    locations: List[str]
