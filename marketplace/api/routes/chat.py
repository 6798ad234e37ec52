"""
Chat room routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.deps import get_chat_service
from marketplace.core.database import get_db
from marketplace.schemas.chat import GeneralRoomRequest, GeneralRoomResponse
from marketplace.services.chat_service import ChatService

router = APIRouter(prefix="/chat-rooms", tags=["chat"])


@router.post("/general", response_model=GeneralRoomResponse)
async def get_or_create_general_room(
    body: GeneralRoomRequest,
    db: AsyncSession = Depends(get_db),
    service: ChatService = Depends(get_chat_service),
):
    """Get the general room for a contractor/client pair, creating it if needed."""
    room_id, created = await service.get_or_create_general_room(
        db, body.contractor_id, body.client_id
    )
    return GeneralRoomResponse(room_id=room_id, created=created)
