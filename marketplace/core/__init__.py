"""Core module exports."""
from marketplace.core.config import settings, get_settings
from marketplace.core.database import Base, get_db, init_db, close_db, engine, async_session_maker
from marketplace.core.cache import TTLCache
from marketplace.core.exceptions import (
    APIException,
    BadRequestException,
    NotFoundException,
    ValidationException,
    InternalServerException,
    ConfigurationException,
    InvalidEventException,
    JobNotFoundException,
    ContractorNotFoundException,
    ChatRoomNotFoundException,
    ChatMessageNotFoundException,
    PushProviderError,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    "engine",
    "async_session_maker",
    # Cache
    "TTLCache",
    # Exceptions
    "APIException",
    "BadRequestException",
    "NotFoundException",
    "ValidationException",
    "InternalServerException",
    "ConfigurationException",
    "InvalidEventException",
    "JobNotFoundException",
    "ContractorNotFoundException",
    "ChatRoomNotFoundException",
    "ChatMessageNotFoundException",
    "PushProviderError",
]
