"""
Notification dispatch schemas.
"""
from typing import List, Optional
from uuid import UUID

from marketplace.schemas.base import BaseSchema


class DispatchError(BaseSchema):
    """One failed send."""

    token: str
    message: str


class DispatchResult(BaseSchema):
    """
    Aggregate outcome of one dispatch pass.

    Partial failure is reported here, never raised.
    """

    job_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    matched: int = 0
    sent: int = 0
    skipped_disabled: int = 0
    skipped_quiet_hours: int = 0
    skipped_duplicate: int = 0
    errors: List[DispatchError] = []

    @property
    def failed(self) -> int:
        return len(self.errors)
