"""MongoDB-backed host adapter.

Reads the assistant's ``chat_sessions`` collection, one document per session
with an embedded message array::

    {
        "session_id": "abc-123",
        "title": "Trip planning",            # optional
        "created_at": "2026-02-08T10:30:00Z",
        "updated_at": "2026-02-08T11:00:00Z",
        "messages": [
            {"role": "user", "content": "Hello!", "timestamp": "..."},
            {"role": "assistant", "content": "Hey!", "timestamp": "...",
             "tool_calls": [{"name": "recall_memory", "args": {...}}]}
        ]
    }

Threads are sessions (most recently updated first); the active thread is
the most recently updated session.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from telegram_bridge.errors import HostDataError
from telegram_bridge.host.events import REPLY_EVENT, EventBus
from telegram_bridge.models import MessageSummary, ReplyEvent, ThreadSummary
from telegram_bridge.utils.text import extract_text

logger = logging.getLogger(__name__)

CHAT_SESSIONS_COLLECTION = "chat_sessions"
BRIDGE_STATE_COLLECTION = "bridge_state"
THREAD_LIST_LIMIT = 50
TITLE_FALLBACK_CHARS = 40


def _thread_title(doc: dict[str, Any]) -> str:
    if doc.get("title"):
        return doc["title"]
    for entry in doc.get("messages", []):
        if entry.get("role") == "user":
            text = extract_text(entry.get("content")).strip().replace("\n", " ")
            if text:
                return text[:TITLE_FALLBACK_CHARS]
    return "Untitled"


def _entry_content(entry: dict[str, Any]) -> Any:
    """Fold recorded tool calls into a parts list the text normalizer understands."""
    content = entry.get("content", "")
    tool_calls = entry.get("tool_calls") or []
    if not tool_calls:
        return content

    parts: list[Any] = list(content) if isinstance(content, list) else []
    if isinstance(content, str) and content:
        parts.append({"type": "text", "text": content})
    parts.extend({"type": f"tool-{tc.get('name', 'unknown')}"} for tc in tool_calls)
    return {"parts": parts}


def _to_message(session_id: str, index: int, entry: dict[str, Any]) -> MessageSummary:
    data: dict[str, Any] = {
        "id": f"{session_id}:{index}",
        "role": entry.get("role", "user"),
        "content": _entry_content(entry),
    }
    if entry.get("timestamp"):
        data["created_at"] = entry["timestamp"]
    return MessageSummary.model_validate(data)


class MongoChatHost:
    """ChatHost over the ``chat_sessions`` collection.

    Lifecycle:
        host = MongoChatHost(uri, database)
        await host.initialize()   # call once at startup
        ...
        await host.close()        # call once at shutdown
    """

    def __init__(self, uri: str, database: str) -> None:
        self._uri = uri
        self._database_name = database
        self._client: AsyncIOMotorClient | None = None
        self._db: AsyncIOMotorDatabase | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        if self._client is not None:
            logger.warning("MongoChatHost already initialized - skipping")
            return

        logger.info("Connecting to MongoDB at %s", self._uri)
        self._client = AsyncIOMotorClient(self._uri, serverSelectionTimeoutMS=5_000)
        self._db = self._client[self._database_name]
        await self._client.admin.command("ping")
        logger.info("MongoDB connection established")

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("MongoDB connection closed")

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            raise HostDataError("MongoChatHost not initialized. Call initialize() first.")
        return self._db

    # ------------------------------------------------------------------
    # ChatHost
    # ------------------------------------------------------------------

    async def list_threads(self) -> list[ThreadSummary]:
        try:
            cursor = (
                self.db[CHAT_SESSIONS_COLLECTION]
                .find({}, {"session_id": 1, "title": 1, "messages": 1, "_id": 0})
                .sort("updated_at", -1)
                .limit(THREAD_LIST_LIMIT)
            )
            return [
                ThreadSummary(id=doc["session_id"], title=_thread_title(doc))
                async for doc in cursor
            ]
        except PyMongoError as e:
            raise HostDataError(f"Failed to list threads: {e}") from e

    async def get_messages(self, thread_id: str) -> list[MessageSummary]:
        try:
            doc = await self.db[CHAT_SESSIONS_COLLECTION].find_one(
                {"session_id": thread_id}, {"messages": 1, "_id": 0}
            )
        except PyMongoError as e:
            raise HostDataError(f"Failed to load messages for {thread_id}: {e}") from e

        if doc is None:
            raise HostDataError(f"Thread not found: {thread_id}", code="thread_not_found")
        return [
            _to_message(thread_id, i, entry)
            for i, entry in enumerate(doc.get("messages", []))
        ]

    async def get_active_thread(self) -> Optional[ThreadSummary]:
        try:
            doc = await self.db[CHAT_SESSIONS_COLLECTION].find_one(
                {},
                {"session_id": 1, "title": 1, "messages": 1, "_id": 0},
                sort=[("updated_at", -1)],
            )
        except PyMongoError as e:
            raise HostDataError(f"Failed to load active thread: {e}") from e

        if doc is None:
            return None
        return ThreadSummary(id=doc["session_id"], title=_thread_title(doc))


class MongoKeyValueStore:
    """Bridge-scoped key-value storage in the ``bridge_state`` collection."""

    def __init__(self, host: MongoChatHost, scope: str = "telegram-bridge") -> None:
        self._host = host
        self._scope = scope

    async def get(self, key: str) -> Any:
        try:
            doc = await self._host.db[BRIDGE_STATE_COLLECTION].find_one(
                {"scope": self._scope, "key": key}
            )
        except PyMongoError as e:
            raise HostDataError(f"Failed to read {key}: {e}") from e
        return doc.get("value") if doc else None

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._host.db[BRIDGE_STATE_COLLECTION].update_one(
                {"scope": self._scope, "key": key},
                {"$set": {"value": value}},
                upsert=True,
            )
        except PyMongoError as e:
            raise HostDataError(f"Failed to write {key}: {e}") from e


class MongoReplyWatcher:
    """Emits ``chat.message.didReceive`` when a session gains an assistant reply.

    Polls ``updated_at``; replies written before :meth:`start` are not replayed.
    """

    def __init__(self, host: MongoChatHost, bus: EventBus, interval: float = 3.0) -> None:
        self._host = host
        self._bus = bus
        self._interval = interval
        self._last_seen: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    async def _latest_update(self) -> Optional[str]:
        doc = await self._host.db[CHAT_SESSIONS_COLLECTION].find_one(
            {}, {"updated_at": 1, "_id": 0}, sort=[("updated_at", -1)]
        )
        return doc.get("updated_at") if doc else None

    async def check_once(self) -> int:
        """Emit events for sessions updated since the last check; returns the count."""
        query = {"updated_at": {"$gt": self._last_seen}} if self._last_seen else {}
        cursor = self._host.db[CHAT_SESSIONS_COLLECTION].find(
            query, {"session_id": 1, "updated_at": 1, "messages": {"$slice": -1}, "_id": 0}
        ).sort("updated_at", 1)

        emitted = 0
        async for doc in cursor:
            self._last_seen = doc.get("updated_at") or self._last_seen
            messages = doc.get("messages") or []
            if not messages or messages[-1].get("role") != "assistant":
                continue
            event = ReplyEvent(
                thread_id=doc["session_id"],
                response={"content": extract_text(_entry_content(messages[-1]))},
            )
            await self._bus.emit(REPLY_EVENT, event)
            emitted += 1
        return emitted

    async def _run(self) -> None:
        while True:
            try:
                await self.check_once()
            except PyMongoError as e:
                logger.error(f"Reply watcher error: {e}")
            await asyncio.sleep(self._interval)

    async def start(self) -> None:
        if self._task is not None:
            return
        self._last_seen = await self._latest_update()
        self._task = asyncio.create_task(self._run())
        logger.info("Reply watcher started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Reply watcher stopped")
