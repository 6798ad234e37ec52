"""
API Routes package.
"""
from fastapi import APIRouter

from marketplace.api.routes.health import router as health_router
from marketplace.api.routes.webhooks import router as webhooks_router
from marketplace.api.routes.contractors import router as contractors_router
from marketplace.api.routes.chat import router as chat_router
from marketplace.api.routes.admin import router as admin_router

# Versioned API router; health is mounted at the root by main.py
api_router = APIRouter()

api_router.include_router(webhooks_router)
api_router.include_router(contractors_router)
api_router.include_router(chat_router)
api_router.include_router(admin_router)

__all__ = [
    "api_router",
    "health_router",
    "webhooks_router",
    "contractors_router",
    "chat_router",
    "admin_router",
]
