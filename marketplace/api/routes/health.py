"""
Health check routes.
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
import redis.asyncio as redis

from marketplace.core.database import get_db
from marketplace.core.config import settings
from marketplace.core.logging import get_logger
from marketplace.schemas.base import BaseSchema

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str
    timestamp: str
    checks: dict


async def ping_redis() -> None:
    client = redis.from_url(settings.redis_url)
    try:
        await client.ping()
    finally:
        await client.aclose()


@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint for monitoring.

    Always answers 200; `status` is "degraded" when a dependency is down.
    """
    checks = {}

    # Check database
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        logger.warning("health_check_failed", component="database", error=str(e))
        checks["database"] = f"unhealthy: {str(e)}"

    # Check Redis
    try:
        await ping_redis()
        checks["redis"] = "healthy"
    except Exception as e:
        logger.warning("health_check_failed", component="redis", error=str(e))
        checks["redis"] = f"unhealthy: {str(e)}"

    all_healthy = all(v == "healthy" for v in checks.values())

    return HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=checks,
    )
