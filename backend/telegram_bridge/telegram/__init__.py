"""Telegram side of the bridge: Bot API transport and outbound dispatcher."""

from .dispatcher import OutboundDispatcher
from .transport import TelegramTransport

__all__ = ["OutboundDispatcher", "TelegramTransport"]
