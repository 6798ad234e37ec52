import json

import httpx
import pytest

from marketplace.core.config import Settings
from marketplace.core.exceptions import ConfigurationException, PushProviderError
from marketplace.push.base import PushMessage
from marketplace.push.fcm import FCMSender
from marketplace.push.onesignal import OneSignalSender
from marketplace.push.registry import get_push_sender, list_providers

MESSAGE = PushMessage(title="New Plumbing Job: Fix sink", body="Location: Nairobi", data={"type": "new_job"})


def client_returning(status_code, body, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestFCM:
    async def test_delivered(self):
        seen = []
        sender = FCMSender("server-key", client=client_returning(200, {"success": 1, "failure": 0}, seen))

        async with sender:
            result = await sender.send("token-1", MESSAGE)

        assert result.ok
        request = seen[0]
        assert request.headers["Authorization"] == "key=server-key"
        payload = json.loads(request.content)
        assert payload["to"] == "token-1"
        assert payload["notification"]["title"] == MESSAGE.title
        assert payload["data"] == {"type": "new_job"}

    async def test_failure_count_in_body_means_not_delivered(self):
        sender = FCMSender("server-key", client=client_returning(200, {"success": 0, "failure": 1}))
        async with sender:
            result = await sender.send("stale-token", MESSAGE)
        assert not result.ok
        assert result.body["failure"] == 1

    async def test_http_error_status(self):
        sender = FCMSender("server-key", client=client_returning(401, {"error": "unauthorized"}))
        async with sender:
            result = await sender.send("token-1", MESSAGE)
        assert not result.ok
        assert result.status_code == 401

    async def test_transport_failure_raises_provider_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        sender = FCMSender("server-key", client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))
        async with sender:
            with pytest.raises(PushProviderError):
                await sender.send("token-1", MESSAGE)

    async def test_requires_context_manager(self):
        with pytest.raises(RuntimeError):
            await FCMSender("server-key").send("token-1", MESSAGE)


class TestOneSignal:
    async def test_delivered(self):
        seen = []
        sender = OneSignalSender(
            "app-id",
            "rest-key",
            android_channel_id="jobs",
            client=client_returning(200, {"id": "abc", "recipients": 1}, seen),
        )
        async with sender:
            result = await sender.send("player-1", MESSAGE)

        assert result.ok
        request = seen[0]
        assert request.headers["Authorization"] == "Basic rest-key"
        payload = json.loads(request.content)
        assert payload["app_id"] == "app-id"
        assert payload["include_player_ids"] == ["player-1"]
        assert payload["headings"] == {"en": MESSAGE.title}
        assert payload["android_channel_id"] == "jobs"

    async def test_errors_in_body_means_not_delivered(self):
        sender = OneSignalSender(
            "app-id",
            "rest-key",
            client=client_returning(200, {"errors": {"invalid_player_ids": ["player-1"]}}),
        )
        async with sender:
            result = await sender.send("player-1", MESSAGE)
        assert not result.ok


class TestRegistry:
    def test_providers(self):
        assert set(list_providers()) == {"fcm", "onesignal"}

    def test_builds_configured_provider(self):
        cfg = Settings(push_provider="onesignal", onesignal_app_id="app", onesignal_rest_api_key="key")
        assert isinstance(get_push_sender(cfg=cfg), OneSignalSender)

    def test_missing_fcm_key(self):
        cfg = Settings(push_provider="fcm", fcm_server_key=None)
        with pytest.raises(ConfigurationException):
            get_push_sender(cfg=cfg)

    def test_missing_onesignal_credentials(self):
        cfg = Settings(push_provider="onesignal", onesignal_app_id="app", onesignal_rest_api_key=None)
        with pytest.raises(ConfigurationException):
            get_push_sender(cfg=cfg)

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationException):
            get_push_sender(provider="carrier-pigeon", cfg=Settings())
