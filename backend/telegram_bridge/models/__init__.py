"""Data models shared by the navigation engine, transport and host adapters."""

from .threads import MessageRole, MessageSummary, ReplyEvent, ReplyPayload, ThreadSummary
from .updates import ApiResult, InboundCallback, InboundMessage, InboundUpdate

__all__ = [
    "ApiResult",
    "InboundCallback",
    "InboundMessage",
    "InboundUpdate",
    "MessageRole",
    "MessageSummary",
    "ReplyEvent",
    "ReplyPayload",
    "ThreadSummary",
]
