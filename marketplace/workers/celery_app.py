"""
Celery application configuration.

Redis is both broker and result backend.
"""
from celery import Celery
from celery.signals import setup_logging as celery_setup_logging, task_postrun, task_prerun

from marketplace.core.config import settings
from marketplace.core.logging import bind_task_context, clear_task_context, setup_logging

# Create Celery app
celery_app = Celery(
    "marketplace",
    broker=settings.redis_url,
    backend=f"{settings.redis_url.rsplit('/', 1)[0]}/1",  # separate DB for results
)

# Configure Celery
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task settings
    task_track_started=True,
    task_time_limit=300,  # 5 minutes hard limit
    task_soft_time_limit=240,  # 4 minutes soft limit

    # Worker settings
    worker_prefetch_multiplier=1,
    task_acks_late=True,

    # Result settings
    result_expires=3600,
)

celery_app.autodiscover_tasks(["marketplace.workers"])


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    # A connected receiver stops Celery from installing its own root handler
    setup_logging()


task_prerun.connect(bind_task_context)
task_postrun.connect(clear_task_context)
