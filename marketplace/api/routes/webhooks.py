"""
Database webhook routes.

The database calls these on INSERT into job_postings and chat_messages with
{"type": "INSERT", "table": ..., "record": {...}}. Dispatch runs inline and
the aggregate result is returned to the caller.
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.deps import get_notification_service
from marketplace.core.database import get_db
from marketplace.core.rate_limit import limiter, RATE_WEBHOOK
from marketplace.schemas.job import WebhookPayload
from marketplace.schemas.notification import DispatchResult
from marketplace.services.notification_service import (
    NotificationService,
    parse_job_event,
    parse_chat_message_event,
)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.post("/job-postings", response_model=DispatchResult)
@limiter.limit(RATE_WEBHOOK)
async def job_posting_created(
    request: Request,
    payload: WebhookPayload,
    db: AsyncSession = Depends(get_db),
    service: NotificationService = Depends(get_notification_service),
):
    """Notify matching contractors about a new job posting."""
    job = parse_job_event(payload.record)
    return await service.dispatch_new_job(db, job)


@router.post("/chat-messages", response_model=DispatchResult)
@limiter.limit(RATE_WEBHOOK)
async def chat_message_created(
    request: Request,
    payload: WebhookPayload,
    db: AsyncSession = Depends(get_db),
    service: NotificationService = Depends(get_notification_service),
):
    """Notify the other participant of a chat room about a new message."""
    message = parse_chat_message_event(payload.record)
    return await service.dispatch_chat_message(db, message)
