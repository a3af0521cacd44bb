"""Thread and message snapshots taken from the host application."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class MessageRole(str, Enum):
    """Message sender role."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class ThreadSummary(BaseModel):
    """One entry of the host's thread listing."""

    id: str
    title: str = "Untitled"

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> Any:
        return value or "Untitled"


class MessageSummary(BaseModel):
    """A single message of a thread, content kept in the host's shape."""

    id: str
    role: MessageRole
    content: Any = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, value: Any) -> Any:
        # tool/function messages are shown as system entries
        if isinstance(value, str) and value not in MessageRole._value2member_map_:
            return MessageRole.SYSTEM
        return value


class ReplyPayload(BaseModel):
    # plain text or structured parts, flattened by the relay
    content: Any = None


class ReplyEvent(BaseModel):
    """Payload of the host's ``chat.message.didReceive`` event."""

    thread_id: str
    response: ReplyPayload = Field(default_factory=ReplyPayload)
