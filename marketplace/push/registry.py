"""
Push provider registry - maps provider names to sender factories.

The configured provider name (settings.push_provider) is looked up here and
the sender is built from settings. Missing credentials are a configuration
error, raised before any notification is attempted.
"""
from typing import Callable, Dict, Optional

from marketplace.core.config import Settings, settings as default_settings
from marketplace.core.exceptions import ConfigurationException
from marketplace.push.base import PushSender
from marketplace.push.fcm import FCMSender
from marketplace.push.onesignal import OneSignalSender


def _build_fcm(cfg: Settings) -> PushSender:
    if not cfg.fcm_server_key:
        raise ConfigurationException("FCM server key is not configured (FCM_SERVER_KEY)")
    return FCMSender(
        server_key=cfg.fcm_server_key,
        api_url=cfg.fcm_api_url,
        timeout=cfg.push_timeout_seconds,
    )


def _build_onesignal(cfg: Settings) -> PushSender:
    if not cfg.onesignal_app_id or not cfg.onesignal_rest_api_key:
        raise ConfigurationException(
            "OneSignal credentials are not configured "
            "(ONESIGNAL_APP_ID, ONESIGNAL_REST_API_KEY)"
        )
    return OneSignalSender(
        app_id=cfg.onesignal_app_id,
        rest_api_key=cfg.onesignal_rest_api_key,
        api_url=cfg.onesignal_api_url,
        android_channel_id=cfg.onesignal_android_channel_id,
        timeout=cfg.push_timeout_seconds,
    )


# Key = value of settings.push_provider
PUSH_PROVIDER_REGISTRY: Dict[str, Callable[[Settings], PushSender]] = {
    "fcm": _build_fcm,
    "onesignal": _build_onesignal,
}


def get_push_sender(
    provider: Optional[str] = None,
    cfg: Optional[Settings] = None,
) -> PushSender:
    """
    Build the sender for `provider` (defaults to settings.push_provider).

    Raises:
        ConfigurationException: Unknown provider or missing credentials
    """
    cfg = cfg or default_settings
    provider = provider or cfg.push_provider

    if provider not in PUSH_PROVIDER_REGISTRY:
        raise ConfigurationException(f"Unknown push provider: {provider}")

    return PUSH_PROVIDER_REGISTRY[provider](cfg)


def list_providers() -> list:
    """Names of all registered push providers."""
    return list(PUSH_PROVIDER_REGISTRY.keys())
