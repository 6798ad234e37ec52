"""
Pydantic schemas for request/response validation and service results.
"""
from marketplace.schemas.base import (
    BaseSchema,
    IDSchema,
    PaginatedResponse,
)
from marketplace.schemas.contractor import (
    WEEKDAYS,
    DaySchedule,
    WorkingHours,
    ContractorListItem,
    ContractorFilters,
    AvailabilityResponse,
    AvailabilityUpdate,
    FilterOptions,
)
from marketplace.schemas.job import JobEvent, WebhookPayload
from marketplace.schemas.chat import (
    ChatMessageEvent,
    GeneralRoomRequest,
    GeneralRoomResponse,
    ReconcileError,
    ReconcileResult,
)
from marketplace.schemas.notification import DispatchError, DispatchResult

__all__ = [
    # Base
    "BaseSchema",
    "IDSchema",
    "PaginatedResponse",
    # Contractor
    "WEEKDAYS",
    "DaySchedule",
    "WorkingHours",
    "ContractorListItem",
    "ContractorFilters",
    "AvailabilityResponse",
    "AvailabilityUpdate",
    "FilterOptions",
    # Job
    "JobEvent",
    "WebhookPayload",
    # Chat
    "ChatMessageEvent",
    "GeneralRoomRequest",
    "GeneralRoomResponse",
    "ReconcileError",
    "ReconcileResult",
    # Notification
    "DispatchError",
    "DispatchResult",
]
