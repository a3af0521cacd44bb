"""Shared test fixtures for the Telegram bridge."""

from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from telegram_bridge.bridge.router import UpdateRouter
from telegram_bridge.models import ApiResult, MessageSummary, ThreadSummary
from telegram_bridge.navigation import NavigationStateMachine, SessionState
from telegram_bridge.telegram.dispatcher import OutboundDispatcher

CHAT_ID = "4242"


class FakeTransport:
    """Records every Bot API call and replays scripted results."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.send_ok = True
        self.edit_ok = True
        self.delete_ok = True
        self.batches: deque[ApiResult] = deque()

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def of(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for called, kwargs in self.calls if called == name]

    def _result(self, ok: bool) -> ApiResult:
        return ApiResult.success(True) if ok else ApiResult.failure("Bad Request")

    async def send_message(self, chat_id, text, reply_markup=None, parse_mode=None):
        self.calls.append(("send_message", dict(chat_id=chat_id, text=text, reply_markup=reply_markup, parse_mode=parse_mode)))
        return self._result(self.send_ok)

    async def edit_message_text(self, chat_id, message_id, text, reply_markup=None, parse_mode=None):
        self.calls.append(("edit_message_text", dict(chat_id=chat_id, message_id=message_id, text=text, reply_markup=reply_markup, parse_mode=parse_mode)))
        return self._result(self.edit_ok)

    async def delete_message(self, chat_id, message_id):
        self.calls.append(("delete_message", dict(chat_id=chat_id, message_id=message_id)))
        return self._result(self.delete_ok)

    async def answer_callback(self, callback_id, text=None):
        self.calls.append(("answer_callback", dict(callback_id=callback_id, text=text)))
        return ApiResult.success(True)

    async def get_updates(self, offset, timeout, allowed_updates=("message", "callback_query")):
        self.calls.append(("get_updates", dict(offset=offset, timeout=timeout)))
        if self.batches:
            return self.batches.popleft()
        return ApiResult.success([])

    async def delete_webhook(self):
        self.calls.append(("delete_webhook", {}))
        return ApiResult.success(True)

    async def set_commands(self, commands=()):
        self.calls.append(("set_commands", {}))
        return ApiResult.success(True)


class FakeHost:
    """In-memory ChatHost."""

    def __init__(self) -> None:
        self.threads: list[ThreadSummary] = []
        self.messages: dict[str, list[MessageSummary]] = {}
        self.active: Optional[ThreadSummary] = None
        self.fail_threads = False
        self.fail_messages = False
        self.message_fetches: list[str] = []

    async def list_threads(self):
        if self.fail_threads:
            raise RuntimeError("host unavailable")
        return list(self.threads)

    async def get_messages(self, thread_id):
        self.message_fetches.append(thread_id)
        if self.fail_messages:
            raise RuntimeError("host unavailable")
        return list(self.messages.get(thread_id, []))

    async def get_active_thread(self):
        return self.active


class MemoryStore:
    def __init__(self) -> None:
        self.data: dict[str, Any] = {}
        self.fail = False

    async def get(self, key):
        if self.fail:
            raise RuntimeError("storage unavailable")
        return self.data.get(key)

    async def set(self, key, value):
        if self.fail:
            raise RuntimeError("storage unavailable")
        self.data[key] = value


class RecordingNotifier:
    def __init__(self) -> None:
        self.notices: list[tuple[str, str, Optional[int]]] = []

    def notify(self, message, severity="info", duration=None):
        self.notices.append((message, severity, duration))


def make_threads(count: int) -> list[ThreadSummary]:
    return [ThreadSummary(id=f"thread-{i:04d}-abcdef", title=f"Thread {i}") for i in range(count)]


def make_messages(count: int) -> list[MessageSummary]:
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return [
        MessageSummary(
            id=f"m{i}",
            role="user" if i % 2 == 0 else "assistant",
            content=f"message number {i}",
            created_at=start + timedelta(minutes=i),
        )
        for i in range(count)
    ]


def callback_data(markup) -> list[str]:
    """Flatten an inline keyboard into its callback payloads."""
    return [button.callback_data for row in markup.inline_keyboard for button in row]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def state() -> SessionState:
    return SessionState()


@pytest.fixture
def machine(host: FakeHost, store: MemoryStore) -> NavigationStateMachine:
    return NavigationStateMachine(
        host, store, chat_id=CHAT_ID, bot_token_set=True, clock=lambda: 1.0
    )


@pytest.fixture
def dispatcher(transport: FakeTransport) -> OutboundDispatcher:
    return OutboundDispatcher(transport, CHAT_ID)


@pytest.fixture
def router(
    state: SessionState,
    machine: NavigationStateMachine,
    dispatcher: OutboundDispatcher,
    notifier: RecordingNotifier,
) -> UpdateRouter:
    return UpdateRouter(state, machine, dispatcher, notifier, clock=lambda: 1_000_000.0)
