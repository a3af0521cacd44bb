"""Bridge runtime: routing, polling loop, reply relay and lifecycle."""

from .relay import ReplyRelay
from .router import UpdateRouter
from .service import TelegramBridge
from .session_loop import SessionLoop

__all__ = ["ReplyRelay", "SessionLoop", "TelegramBridge", "UpdateRouter"]
