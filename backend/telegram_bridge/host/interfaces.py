"""Interfaces the bridge needs from the host application."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional, Protocol, Sequence

from telegram_bridge.models import MessageSummary, ThreadSummary


class ChatHost(Protocol):
    """Read access to the host's conversation threads."""

    async def list_threads(self) -> Sequence[ThreadSummary]: ...

    async def get_messages(self, thread_id: str) -> Sequence[MessageSummary]: ...

    async def get_active_thread(self) -> Optional[ThreadSummary]: ...


class KeyValueStore(Protocol):
    """Durable, bridge-scoped key-value storage."""

    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...


class Notifier(Protocol):
    """Notifications shown to the host user outside of Telegram."""

    def notify(self, message: str, severity: str = "info", duration: Optional[int] = None) -> None: ...


class Disposable(Protocol):
    def dispose(self) -> None: ...


class EventSource(Protocol):
    def on(self, event: str, handler: Callable[[Any], Awaitable[None]]) -> Disposable: ...
