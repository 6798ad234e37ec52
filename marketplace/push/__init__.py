"""
Push package - provider senders behind one interface.
"""
from marketplace.push.base import PushMessage, PushResult, PushSender
from marketplace.push.fcm import FCMSender
from marketplace.push.onesignal import OneSignalSender
from marketplace.push.links import job_deep_link, chat_deep_link
from marketplace.push.registry import get_push_sender, list_providers

__all__ = [
    "PushMessage",
    "PushResult",
    "PushSender",
    "FCMSender",
    "OneSignalSender",
    "job_deep_link",
    "chat_deep_link",
    "get_push_sender",
    "list_providers",
]
