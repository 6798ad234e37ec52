"""
Base classes for push notification providers.

Every provider implements one operation: deliver a provider-agnostic
PushMessage to a single device token and report what happened. Senders
share one httpx client for their lifetime (use them as async context
managers) and apply a per-call timeout.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from marketplace.core.config import settings
from marketplace.core.exceptions import PushProviderError


@dataclass
class PushMessage:
    """What to show and what to hand the app when the user taps it."""

    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PushResult:
    """Outcome of one send to one device token."""

    ok: bool
    status_code: Optional[int] = None
    body: Any = None


class PushSender(ABC):
    """
    Base class for all push providers.

    Subclasses build the provider payload and decide whether a response
    counts as delivered; transport concerns live here.
    """

    name: str = "base"

    def __init__(self, timeout: Optional[float] = None, client: Optional[httpx.AsyncClient] = None):
        """
        Args:
            timeout: Per-request timeout in seconds (defaults to settings)
            client: Pre-built client, mainly for tests (MockTransport)
        """
        self.timeout = timeout if timeout is not None else settings.push_timeout_seconds
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    def build_payload(self, device_token: str, message: PushMessage) -> Dict[str, Any]:
        """Provider-specific JSON body for one token."""

    @abstractmethod
    def auth_headers(self) -> Dict[str, str]:
        """Provider-specific authorization headers."""

    @abstractmethod
    def get_endpoint(self) -> str:
        """URL the payload is POSTed to."""

    def is_delivered(self, response: httpx.Response, body: Any) -> bool:
        """Whether a response means the message was accepted. Defaults to 2xx."""
        return response.is_success

    async def send(self, device_token: str, message: PushMessage) -> PushResult:
        """
        POST one message for one token.

        Returns a PushResult for any HTTP response (including non-2xx).
        Raises PushProviderError on timeouts and transport failures.
        """
        if self._client is None:
            raise RuntimeError(f"{type(self).__name__} must be used as an async context manager")

        try:
            response = await self._client.post(
                self.get_endpoint(),
                json=self.build_payload(device_token, message),
                headers={"Content-Type": "application/json", **self.auth_headers()},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise PushProviderError(f"{self.name} request timed out") from e
        except httpx.HTTPError as e:
            raise PushProviderError(f"{self.name} request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = response.text

        return PushResult(
            ok=self.is_delivered(response, body),
            status_code=response.status_code,
            body=body,
        )
