"""
Admin routes - operational endpoints.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.deps import get_chat_service
from marketplace.core.database import get_db
from marketplace.core.rate_limit import limiter, RATE_ADMIN
from marketplace.schemas.chat import ReconcileResult
from marketplace.services.chat_service import ChatService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reconcile-chat-rooms", response_model=ReconcileResult)
@limiter.limit(RATE_ADMIN)
async def reconcile_chat_rooms(
    request: Request,
    db: AsyncSession = Depends(get_db),
    service: ChatService = Depends(get_chat_service),
):
    """Create missing general rooms for assigned jobs. Runs synchronously."""
    return await service.reconcile_assigned_jobs(db)
