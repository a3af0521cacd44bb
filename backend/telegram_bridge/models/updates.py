"""Telegram-side models: API call results and inbound updates.

The transport converts python-telegram-bot objects into these models so the
session loop and router never depend on the wire representation.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel


class ApiResult(BaseModel):
    """Outcome of one Bot API call."""

    ok: bool
    result: Any = None
    description: Optional[str] = None

    @classmethod
    def success(cls, result: Any = None) -> "ApiResult":
        return cls(ok=True, result=result)

    @classmethod
    def failure(cls, description: str) -> "ApiResult":
        return cls(ok=False, description=description)


class InboundMessage(BaseModel):
    message_id: int
    chat_id: str
    date: datetime
    text: Optional[str] = None


class InboundCallback(BaseModel):
    id: str
    data: str = ""
    message_id: Optional[int] = None


class InboundUpdate(BaseModel):
    """One update from ``getUpdates``: either a message or a callback query."""

    update_id: int
    message: Optional[InboundMessage] = None
    callback_query: Optional[InboundCallback] = None
