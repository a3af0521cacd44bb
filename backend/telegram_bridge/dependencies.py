"""Singleton providers for the standalone bridge process."""

from telegram_bridge.config import settings
from telegram_bridge.host.events import EventBus
from telegram_bridge.host.mongo import MongoChatHost

# Global singleton instances (safe within one event loop)
_event_bus: EventBus | None = None
_chat_host: MongoChatHost | None = None


def get_event_bus() -> EventBus:
    """Return singleton EventBus instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventBus()
    return _event_bus


def get_chat_host() -> MongoChatHost:
    """Return singleton MongoChatHost instance."""
    global _chat_host
    if _chat_host is None:
        _chat_host = MongoChatHost(settings.mongodb_uri, settings.mongodb_database)
    return _chat_host
