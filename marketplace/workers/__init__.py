"""
Workers package - Celery tasks and background processing.
"""
from marketplace.workers.celery_app import celery_app
from marketplace.workers.tasks import (
    notify_new_job,
    notify_chat_message,
)
from marketplace.workers.scheduler import reconcile_chat_rooms

__all__ = [
    "celery_app",
    "notify_new_job",
    "notify_chat_message",
    "reconcile_chat_rooms",
]
