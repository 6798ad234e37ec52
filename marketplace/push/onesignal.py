"""
OneSignal sender (REST API).

Request:
  POST https://onesignal.com/api/v1/notifications
  Authorization: Basic <REST API key>
  {"app_id": ..., "include_player_ids": [<token>], "headings": {"en": ...}, ...}

Rejected player ids come back as 200 with an "errors" entry, so the body is
inspected as well as the status.
"""
from typing import Any, Dict, Optional

import httpx

from marketplace.core.config import settings
from marketplace.push.base import PushMessage, PushSender


class OneSignalSender(PushSender):
    """Sends to devices registered with OneSignal (token = player id)."""

    name = "onesignal"

    def __init__(
        self,
        app_id: str,
        rest_api_key: str,
        api_url: Optional[str] = None,
        android_channel_id: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        if not app_id or not rest_api_key:
            raise ValueError("OneSignal sender requires app_id and rest_api_key")
        self.app_id = app_id
        self.rest_api_key = rest_api_key
        self.api_url = api_url or settings.onesignal_api_url
        self.android_channel_id = android_channel_id or settings.onesignal_android_channel_id

    def get_endpoint(self) -> str:
        return self.api_url

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Basic {self.rest_api_key}"}

    def build_payload(self, device_token: str, message: PushMessage) -> Dict[str, Any]:
        return {
            "app_id": self.app_id,
            "include_player_ids": [device_token],
            "headings": {"en": message.title},
            "contents": {"en": message.body},
            "data": message.data,
            "ios_sound": "default",
            "android_sound": "default",
            "android_channel_id": self.android_channel_id,
            "priority": 10,
        }

    def is_delivered(self, response: httpx.Response, body: Any) -> bool:
        if not response.is_success:
            return False
        if isinstance(body, dict) and body.get("errors"):
            return False
        return True
