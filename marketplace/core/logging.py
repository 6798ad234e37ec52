"""
Structured logging configuration using structlog.

Every event carries the service name and environment. Events logged while
handling an HTTP request carry its request_id; events logged inside a
Celery task carry task_id and task_name.

- Development: colored console output
- Elsewhere: JSON lines
"""
import logging
import sys
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from marketplace.core.config import settings

# Push senders log every HTTP call through httpx; keep that out of INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "celery.redirected")


def add_service_context(logger, method_name, event_dict):
    """structlog processor: stamp the service name and environment."""
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("env", settings.environment)
    return event_dict


def setup_logging() -> None:
    """Configure structlog and stdlib logging. Call once per process."""
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.environment == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # stdlib records (uvicorn, celery, sqlalchemy) get the same context
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# ─── Correlation ──────────────────────────────────────────────


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind the caller's X-Request-ID (or a fresh one) for the request's logs."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def bind_task_context(task_id=None, task=None, **kwargs) -> None:
    """Celery task_prerun handler."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        task_id=task_id,
        task_name=getattr(task, "name", None),
    )


def clear_task_context(**kwargs) -> None:
    """Celery task_postrun handler."""
    structlog.contextvars.clear_contextvars()
