"""
Repository layer - data access abstraction.

Repositories handle all database queries, keeping SQL/ORM logic
out of the service and route layers.
"""
from marketplace.repositories.base import BaseRepository
from marketplace.repositories.contractor_repository import ContractorRepository
from marketplace.repositories.job_repository import JobRepository
from marketplace.repositories.chat_repository import ChatRoomRepository, ChatMessageRepository
from marketplace.repositories.notification_repository import (
    DeviceTokenRepository,
    PreferenceRepository,
    JobNotificationRepository,
)

__all__ = [
    "BaseRepository",
    "ContractorRepository",
    "JobRepository",
    "ChatRoomRepository",
    "ChatMessageRepository",
    "DeviceTokenRepository",
    "PreferenceRepository",
    "JobNotificationRepository",
]
