"""
ContractorProfile model - a service provider matched against job postings.
"""
import uuid
from datetime import datetime
from typing import Optional, List
from sqlalchemy import String, Text, Float, Integer, DateTime
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from marketplace.models.base import BaseModel


AVAILABILITY_AVAILABLE = "available"
AVAILABILITY_BUSY = "busy"
AVAILABILITY_OFFLINE = "offline"
AVAILABILITY_STATUSES = (AVAILABILITY_AVAILABLE, AVAILABILITY_BUSY, AVAILABILITY_OFFLINE)


class ContractorProfile(BaseModel):
    """
    Contractor profile entity.

    `specialties` and `service_areas` are the current matching fields.
    `region_text` and `specialty_tags` are legacy fields, consulted only when
    the new ones are empty.
    """

    __tablename__ = "contractor_profiles"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        unique=True,
        index=True,
    )

    # Profile
    full_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    years_experience: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    profile_picture_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    average_rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True, index=True)

    # Matching
    specialties: Mapped[List[str]] = mapped_column(ARRAY(String), default=list)
    service_areas: Mapped[List[str]] = mapped_column(ARRAY(String), default=list)

    # Legacy matching fields
    region_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    specialty_tags: Mapped[List[str]] = mapped_column(ARRAY(String), default=list)

    # Availability
    availability_status: Mapped[str] = mapped_column(
        String(20),
        default=AVAILABILITY_AVAILABLE,
        server_default=AVAILABILITY_AVAILABLE,
        index=True,
    )  # 'available', 'busy', 'offline'
    availability_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    availability_updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    busy_until: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    # {"monday": {"enabled": true, "start": "09:00", "end": "17:00"}, ...}
    working_hours: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)

    def __repr__(self) -> str:
        return f"<ContractorProfile {self.full_name} user_id={self.user_id}>"
