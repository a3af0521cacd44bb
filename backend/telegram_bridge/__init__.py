"""
telegram-bridge: relay AI-assistant conversations to a Telegram chat.

Long-polls the Bot API, drives an inline-keyboard menu for browsing threads
and messages, and forwards finished assistant replies to the chat.
"""

from telegram_bridge.bridge import TelegramBridge
from telegram_bridge.config import Settings, get_settings
from telegram_bridge.errors import BridgeError, ConfigurationError, HostDataError

__version__ = "0.1.0"
__all__ = [
    "BridgeError",
    "ConfigurationError",
    "HostDataError",
    "Settings",
    "TelegramBridge",
    "get_settings",
]
