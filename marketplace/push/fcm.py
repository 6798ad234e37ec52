"""
Firebase Cloud Messaging sender (HTTP endpoint with server key).

Request:
  POST https://fcm.googleapis.com/fcm/send
  Authorization: key=<server key>
  {"to": <token>, "notification": {...}, "data": {...}, "priority": "high"}

FCM answers 200 even when the token was rejected; the per-message outcome
is in the body: {"success": 0, "failure": 1, "results": [{"error": "NotRegistered"}]}
"""
from typing import Any, Dict, Optional

import httpx

from marketplace.core.config import settings
from marketplace.push.base import PushMessage, PushSender


class FCMSender(PushSender):
    """Sends to Android, iOS and web tokens registered with FCM."""

    name = "fcm"

    def __init__(
        self,
        server_key: str,
        api_url: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        if not server_key:
            raise ValueError("FCM sender requires a server key")
        self.server_key = server_key
        self.api_url = api_url or settings.fcm_api_url

    def get_endpoint(self) -> str:
        return self.api_url

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"key={self.server_key}"}

    def build_payload(self, device_token: str, message: PushMessage) -> Dict[str, Any]:
        return {
            "to": device_token,
            "notification": {
                "title": message.title,
                "body": message.body,
                # iOS
                "sound": "default",
                "badge": 1,
            },
            "data": message.data,
            "priority": "high",
        }

    def is_delivered(self, response: httpx.Response, body: Any) -> bool:
        if not response.is_success:
            return False
        if isinstance(body, dict) and body.get("failure", 0) > 0:
            return False
        return True
