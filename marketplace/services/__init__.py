"""
Service layer - business logic and orchestration.

RULE: Routes and tasks call services. Services call repositories. Never the reverse.
"""
from marketplace.services.notification_service import NotificationService
from marketplace.services.chat_service import ChatService
from marketplace.services.contractor_service import ContractorService

__all__ = [
    "NotificationService",
    "ChatService",
    "ContractorService",
]
