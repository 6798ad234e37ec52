"""
Database models for the marketplace dispatch service.

All models use UUID primary keys and include created_at/updated_at timestamps.
"""
from marketplace.models.base import BaseModel, TimestampMixin, UUIDMixin
from marketplace.models.contractor_profile import ContractorProfile
from marketplace.models.job_posting import JobPosting
from marketplace.models.chat import ChatRoom, ChatMessage
from marketplace.models.notification import (
    UserDeviceToken,
    UserNotificationPreference,
    JobNotification,
)

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "UUIDMixin",
    "ContractorProfile",
    "JobPosting",
    "ChatRoom",
    "ChatMessage",
    "UserDeviceToken",
    "UserNotificationPreference",
    "JobNotification",
]
