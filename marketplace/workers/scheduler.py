"""
Celery Beat scheduler configuration.

Periodic tasks:
- Chat-room reconciliation over assigned jobs (hourly by default)
"""
from datetime import timedelta

from celery.schedules import crontab

from marketplace.core.config import settings
from marketplace.core.database import async_session_maker
from marketplace.core.logging import get_logger
from marketplace.workers.celery_app import celery_app
from marketplace.workers.tasks import run_async

logger = get_logger(__name__)


def _reconcile_schedule():
    minutes = settings.reconcile_interval_minutes
    if minutes == 60:
        return crontab(minute=0)
    if minutes < 60 and 60 % minutes == 0:
        return crontab(minute=f"*/{minutes}")
    return timedelta(minutes=minutes)


# ─── Periodic Task Schedule ────────────────────────────────────

celery_app.conf.beat_schedule = {
    "reconcile-chat-rooms": {
        "task": "marketplace.workers.scheduler.reconcile_chat_rooms",
        "schedule": _reconcile_schedule(),
    },
}


# ─── Scheduled Tasks ──────────────────────────────────────────

@celery_app.task
def reconcile_chat_rooms():
    """Create missing general chat rooms for assigned jobs."""
    return run_async(_reconcile_chat_rooms())


async def _reconcile_chat_rooms():
    from marketplace.services.chat_service import ChatService

    service = ChatService()

    async with async_session_maker() as db:
        result = await service.reconcile_assigned_jobs(db)

    if result.errors:
        logger.warning("reconcile_chat_rooms_errors", failed=len(result.errors))
    return result.model_dump(mode="json")
