"""
Marketplace Dispatch API - FastAPI Application Entry Point.

Receives database webhooks for new jobs and chat messages, fans push
notifications out to contractors, and serves contractor listings and chat
room maintenance endpoints.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from marketplace.core.cache import TTLCache
from marketplace.core.config import settings
from marketplace.core.database import init_db, close_db
from marketplace.core.exceptions import APIException
from marketplace.core.logging import RequestIDMiddleware, get_logger, setup_logging
from marketplace.core.rate_limit import limiter
from marketplace.api.routes import api_router, health_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - startup and shutdown."""
    setup_logging()
    logger.info(
        "starting_app",
        app_name=settings.app_name,
        env=settings.environment,
        push_provider=settings.push_provider,
    )
    await init_db()
    logger.info("database_initialized")

    yield

    logger.info("shutting_down")
    await close_db()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Job matching, push notification dispatch and chat room maintenance",
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan,
)

# Listing cache, shared by every request of this process
app.state.contractor_cache = TTLCache(
    ttl_seconds=settings.contractor_cache_ttl_seconds,
    max_entries=settings.contractor_cache_max_entries,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Request ID correlation
app.add_middleware(RequestIDMiddleware)

# CORS middleware - explicit methods and headers, not wildcards
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "X-Request-ID"],
)


# Exception handlers
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions."""
    if exc.status_code >= 500:
        logger.error("api_error", code=exc.code, message=exc.message, path=request.url.path)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.code,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions - log full detail, return sanitized message."""
    logger.error(
        "unhandled_exception",
        exc_type=type(exc).__name__,
        exc_message=str(exc),
        path=request.url.path,
        exc_info=True,
    )

    if settings.debug:
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_error",
                "message": str(exc),
            },
        )

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
        },
    )


# Routes
app.include_router(health_router)
app.include_router(api_router, prefix=settings.api_prefix)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - API info."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs" if settings.debug else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "marketplace.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
