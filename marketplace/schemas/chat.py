"""
Chat schemas.
"""
from typing import List, Optional
from uuid import UUID

from marketplace.schemas.base import BaseSchema


class ChatMessageEvent(BaseSchema):
    """A chat message as delivered by the "new message" database webhook."""

    id: UUID
    room_id: UUID
    sender_user_id: UUID
    content: str = ""
    sender_name: Optional[str] = None


class GeneralRoomRequest(BaseSchema):
    """Get-or-create request for a contractor/client general room."""

    contractor_id: UUID
    client_id: UUID


class GeneralRoomResponse(BaseSchema):
    room_id: UUID
    created: bool


class ReconcileError(BaseSchema):
    job_id: UUID
    error: str


class ReconcileResult(BaseSchema):
    """Outcome of a chat-room repair sweep over assigned jobs."""

    checked: int = 0
    created: int = 0
    existing: int = 0
    errors: List[ReconcileError] = []
