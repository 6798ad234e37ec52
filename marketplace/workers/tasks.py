"""
Celery tasks for background processing.

Tasks are thin entry points:
  1. Open a DB session (outside FastAPI's request cycle)
  2. Call a service method
  3. Return the result as a JSON-friendly dict
"""
import asyncio
from uuid import UUID

from marketplace.workers.celery_app import celery_app
from marketplace.core.database import async_session_maker, engine
from marketplace.core.logging import get_logger

logger = get_logger(__name__)


async def _run_and_dispose(coro):
    try:
        return await coro
    finally:
        # Pooled asyncpg connections are bound to this loop, which is about to close
        await engine.dispose()


def run_async(coro):
    """
    Helper to run async code in sync Celery tasks.

    Celery workers are synchronous; services are async. Each call gets a
    fresh event loop, so the engine's pool is emptied before the loop closes.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(_run_and_dispose(coro))
    finally:
        loop.close()


@celery_app.task
def notify_new_job(job_id: str):
    """Notify matching contractors about a job posting."""
    return run_async(_notify_new_job(job_id))


async def _notify_new_job(job_id: str):
    from marketplace.services.notification_service import NotificationService

    service = NotificationService()

    async with async_session_maker() as db:
        result = await service.notify_for_job_id(db, UUID(job_id))

    logger.info("task_notify_new_job_done", job_id=job_id, sent=result.sent, failed=result.failed)
    return result.model_dump(mode="json")


@celery_app.task
def notify_chat_message(message_id: str):
    """Notify the recipient of a chat message."""
    return run_async(_notify_chat_message(message_id))


async def _notify_chat_message(message_id: str):
    from marketplace.services.notification_service import NotificationService

    service = NotificationService()

    async with async_session_maker() as db:
        result = await service.notify_for_message_id(db, UUID(message_id))

    logger.info("task_notify_chat_message_done", message_id=message_id, sent=result.sent)
    return result.model_dump(mode="json")
