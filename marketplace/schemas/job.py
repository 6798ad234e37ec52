"""
Job posting schemas.
"""
from typing import Any, List, Optional
from uuid import UUID
from pydantic import field_validator

from marketplace.schemas.base import BaseSchema


class JobEvent(BaseSchema):
    """
    A job posting as delivered by the "new job" database webhook.

    Only the fields matching and notification text need. Null arrays are
    normalized to empty lists.
    """

    id: UUID
    title: str = ""
    location_text: Optional[str] = None
    compensation_range: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    required_skills: List[str] = []
    specialty_tags: List[str] = []
    posted_by_user_id: Optional[UUID] = None
    status: Optional[str] = None

    @field_validator("required_skills", "specialty_tags", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class WebhookPayload(BaseSchema):
    """
    Database webhook envelope.

    {"type": "INSERT", "table": "job_postings", "record": {...}, "old_record": null}
    """

    type: Optional[str] = None
    table: Optional[str] = None
    record: Optional[dict] = None
