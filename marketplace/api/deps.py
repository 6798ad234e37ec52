"""
API dependencies for dependency injection.

Services are built per request; tests replace them through
app.dependency_overrides.
"""
from fastapi import Request

from marketplace.core.cache import TTLCache
from marketplace.core.config import settings
from marketplace.services.chat_service import ChatService
from marketplace.services.contractor_service import ContractorService
from marketplace.services.notification_service import NotificationService


def get_contractor_cache(request: Request) -> TTLCache:
    """
    The application's listing cache, created with the app (see main.py).

    Falls back to a fresh cache when the app was built without one.
    """
    cache = getattr(request.app.state, "contractor_cache", None)
    if cache is None:
        cache = TTLCache(
            ttl_seconds=settings.contractor_cache_ttl_seconds,
            max_entries=settings.contractor_cache_max_entries,
        )
        request.app.state.contractor_cache = cache
    return cache


def get_contractor_service(request: Request) -> ContractorService:
    return ContractorService(cache=get_contractor_cache(request))


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_chat_service() -> ChatService:
    return ChatService()
