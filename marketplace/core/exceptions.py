"""
Custom exceptions for the application.

API-facing errors inherit from APIException so the exception handlers in
main.py can render them consistently. PushProviderError is deliberately NOT
an APIException: it is captured per device token by the dispatcher and never
reaches a response.
"""
from typing import Optional, Any


class APIException(Exception):
    """
    Base exception for all API errors.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Any] = None,
    ):
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        super().__init__(self.message)


class BadRequestException(APIException):
    """400 Bad Request"""

    def __init__(self, message: str = "Bad request", code: str = "BAD_REQUEST"):
        super().__init__(400, code, message)


class NotFoundException(APIException):
    """404 Not Found"""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(404, code, message)


class ValidationException(APIException):
    """422 Validation Error"""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(422, code, message, details)


class InternalServerException(APIException):
    """500 Internal Server Error"""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
    ):
        super().__init__(500, code, message)


class ConfigurationException(InternalServerException):
    """Required configuration (credentials, provider) is missing. Fatal for the operation."""

    def __init__(self, message: str = "Service is not configured"):
        super().__init__(message=message, code="CONFIGURATION_ERROR")


class InvalidEventException(BadRequestException):
    """Webhook/event payload is malformed (e.g. missing record id)."""

    def __init__(self, message: str = "Invalid event payload"):
        super().__init__(message=message, code="INVALID_EVENT")


# Resource specific exceptions
class JobNotFoundException(NotFoundException):
    """Job posting not found"""

    def __init__(self):
        super().__init__(message="Job posting not found", code="JOB_NOT_FOUND")


class ContractorNotFoundException(NotFoundException):
    """Contractor profile not found"""

    def __init__(self):
        super().__init__(message="Contractor profile not found", code="CONTRACTOR_NOT_FOUND")


class ChatRoomNotFoundException(NotFoundException):
    """Chat room not found"""

    def __init__(self):
        super().__init__(message="Chat room not found", code="CHAT_ROOM_NOT_FOUND")


class ChatMessageNotFoundException(NotFoundException):
    """Chat message not found"""

    def __init__(self):
        super().__init__(message="Chat message not found", code="CHAT_MESSAGE_NOT_FOUND")


class PushProviderError(Exception):
    """A push provider call failed (transport error, timeout, rejected token)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)
