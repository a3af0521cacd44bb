"""Host application collaborators: chat data, storage, events, notifications."""

from .events import REPLY_EVENT, EventBus, Subscription
from .interfaces import ChatHost, EventSource, KeyValueStore, Notifier
from .notify import LoggingNotifier

__all__ = [
    "REPLY_EVENT",
    "ChatHost",
    "EventBus",
    "EventSource",
    "KeyValueStore",
    "LoggingNotifier",
    "Notifier",
    "Subscription",
]
