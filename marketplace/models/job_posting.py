"""
JobPosting model - a job a client posts for contractors.
"""
import uuid
from typing import TYPE_CHECKING, Optional, List
from sqlalchemy import String, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.models.base import BaseModel

if TYPE_CHECKING:
    from marketplace.models.contractor_profile import ContractorProfile


JOB_STATUS_OPEN = "open"
JOB_STATUS_ASSIGNED = "assigned"
JOB_STATUS_COMPLETED = "completed"
JOB_STATUS_CANCELLED = "cancelled"

PAYMENT_UNPAID = "unpaid"
PAYMENT_PAID = "paid"
PAYMENT_REFUNDED = "refunded"


class JobPosting(BaseModel):
    """
    Job posting entity.

    Required skills are fixed at creation. Assignment sets `status` to
    'assigned' and `selected_contractor_id` to the chosen profile.
    """

    __tablename__ = "job_postings"

    posted_by_user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
        index=True,
    )

    # Core fields
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    compensation_range: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Category
    category_id: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    category_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Skills
    required_skills: Mapped[List[str]] = mapped_column(ARRAY(String), default=list)
    specialty_tags: Mapped[List[str]] = mapped_column(ARRAY(String), default=list)  # legacy

    # Status
    payment_status: Mapped[str] = mapped_column(
        String(20),
        default=PAYMENT_UNPAID,
        server_default=PAYMENT_UNPAID,
    )  # 'unpaid', 'paid', 'refunded'
    status: Mapped[str] = mapped_column(
        String(20),
        default=JOB_STATUS_OPEN,
        server_default=JOB_STATUS_OPEN,
        index=True,
    )  # 'open', 'assigned', 'completed', 'cancelled'

    selected_contractor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("contractor_profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    selected_contractor: Mapped[Optional["ContractorProfile"]] = relationship(
        "ContractorProfile",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<JobPosting {self.title} status={self.status}>"
