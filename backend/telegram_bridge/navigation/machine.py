"""Navigation state machine for the Telegram menu.

Turns one decoded :class:`Action` plus the current :class:`SessionState`
into a :class:`Screen` to display, mutating the state along the way.
Host failures are caught per action: the caller gets a short notice and the
state is left as it was.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict
from telegram import InlineKeyboardMarkup

from telegram_bridge.host.interfaces import ChatHost, KeyValueStore
from telegram_bridge.models import MessageRole, MessageSummary, ThreadSummary
from telegram_bridge.navigation import keyboards
from telegram_bridge.navigation.actions import Action, Verb
from telegram_bridge.navigation.state import SessionState, View
from telegram_bridge.utils.text import extract_text, to_hypertext, truncate

logger = logging.getLogger(__name__)

SELECTED_THREAD_KEY = "selectedThreadId"
THREAD_LIMIT = 50
MESSAGE_DETAIL_LIMIT = 3500
ID_PREVIEW_CHARS = 12

MENU_TEXT = "🤖 Telegram Bridge\n\nSelect an option:"
NO_THREAD_TEXT = "❌ No thread selected.\n\nPlease select a thread first."


class Screen(BaseModel):
    """What to show after an action.

    ``text`` is ``None`` when nothing should be rendered; ``notice`` is the
    short text attached to the callback acknowledgement.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: Optional[str] = None
    keyboard: Optional[InlineKeyboardMarkup] = None
    html: bool = False
    notice: Optional[str] = None


def short_id(thread_id: str) -> str:
    return f"{thread_id[:ID_PREVIEW_CHARS]}..."


def _as_thread(item: Any) -> ThreadSummary:
    if isinstance(item, ThreadSummary):
        return item
    return ThreadSummary.model_validate(item)


def _as_message(item: Any) -> MessageSummary:
    if isinstance(item, MessageSummary):
        return item
    return MessageSummary.model_validate(item)


class NavigationStateMachine:
    """Computes screens and state transitions for the inline menu."""

    def __init__(
        self,
        host: ChatHost,
        store: KeyValueStore,
        chat_id: str = "",
        bot_token_set: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._host = host
        self._store = store
        self._chat_id = chat_id
        self._bot_token_set = bot_token_set
        self._clock = clock

        self._handlers = {
            Verb.MENU: self._menu,
            Verb.THREADS: self._threads,
            Verb.SELECT: self._select,
            Verb.MESSAGES: self._messages,
            Verb.VIEW: self._view,
            Verb.CURRENT: self._current,
            Verb.REFRESH: self._refresh,
            Verb.DEBUG: self._debug,
        }

    async def handle(self, state: SessionState, action: Action) -> Screen:
        handler = self._handlers.get(action.verb)
        if handler is None:
            logger.debug(f"Ignoring unknown action: {action.raw!r}")
            return Screen()
        return await handler(state, action)

    # ------------------------------------------------------------------
    # Menu
    # ------------------------------------------------------------------

    async def _menu(self, state: SessionState, action: Action) -> Screen:
        state.move_to(View.MENU)
        return Screen(text=MENU_TEXT, keyboard=keyboards.main_menu())

    async def _refresh(self, state: SessionState, action: Action) -> Screen:
        state.reset()
        state.move_to(View.MENU)
        return Screen(
            text="🔄 Cache cleared!\n\nSelect an option:",
            keyboard=keyboards.main_menu(),
            notice="Refreshed!",
        )

    async def _debug(self, state: SessionState, action: Action) -> Screen:
        selected = short_id(state.selected_thread_id) if state.selected_thread_id else "None"
        lines = [
            "🐛 Debug Info",
            "",
            f"Selected Thread: {selected}",
            f"Cached Threads: {len(state.thread_cache)}",
            f"Cached Messages: {len(state.message_cache)}",
            f"Message Page Index: {state.message_page}",
            f"Update Cursor: {state.update_cursor}",
            f"Bot Token: {'✅ Set' if self._bot_token_set else '❌ Not set'}",
            f"Chat ID: {self._chat_id or 'Not set'}",
        ]
        state.move_to(View.DEBUG)
        return Screen(text="\n".join(lines), keyboard=keyboards.debug_keyboard())

    # ------------------------------------------------------------------
    # Threads
    # ------------------------------------------------------------------

    async def _threads(self, state: SessionState, action: Action) -> Screen:
        page = action.page
        try:
            threads = await self._host.list_threads()
            thread_cache = [_as_thread(t) for t in list(threads)[:THREAD_LIMIT]]
        except Exception as e:
            logger.error(f"Error loading threads: {e}", exc_info=True)
            return Screen(notice="Error loading threads")

        state.thread_cache = thread_cache
        state.move_to(View.THREAD_LIST, page)
        return Screen(
            text=f"📋 Threads ({len(thread_cache)} total)\n\nTap to select:",
            keyboard=keyboards.threads_keyboard(thread_cache, page, state.selected_thread_id),
        )

    async def _select(self, state: SessionState, action: Action) -> Screen:
        idx = action.arg
        if idx is None or not 0 <= idx < len(state.thread_cache):
            return Screen()

        thread = state.thread_cache[idx]
        state.selected_thread_id = thread.id
        if state.message_thread_id != thread.id:
            state.clear_messages()

        try:
            await self._store.set(SELECTED_THREAD_KEY, thread.id)
        except Exception as e:
            logger.warning(f"Could not persist selected thread {thread.id}: {e}")

        state.move_to(View.THREAD_DETAIL, idx)
        logger.info(f"Selected thread {thread.id}")
        return Screen(
            text=f"✅ Thread selected:\n\n{thread.title}\n\nID: {short_id(thread.id)}",
            keyboard=keyboards.thread_selected_keyboard(),
            notice="Selected!",
        )

    async def _current(self, state: SessionState, action: Action) -> Screen:
        if state.selected_thread_id:
            cached = next(
                (t for t in state.thread_cache if t.id == state.selected_thread_id), None
            )
            title = cached.title if cached else "Unknown"
            text = f"📍 Current Thread:\n\n{title}\n\nID: {short_id(state.selected_thread_id)}"
        else:
            try:
                active = await self._host.get_active_thread()
            except Exception as e:
                logger.error(f"Error loading active thread: {e}", exc_info=True)
                return Screen(notice="Error loading thread")
            if active:
                active = _as_thread(active)
                text = f"📍 Using Active Thread:\n\n{active.title}\n\nID: {short_id(active.id)}"
            else:
                text = "❌ No thread selected"

        state.move_to(View.CURRENT_THREAD)
        return Screen(text=text, keyboard=keyboards.current_thread_keyboard())

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def _effective_thread_id(self, state: SessionState) -> Optional[str]:
        if state.selected_thread_id:
            return state.selected_thread_id
        active = await self._host.get_active_thread()
        return _as_thread(active).id if active else None

    async def _messages(self, state: SessionState, action: Action) -> Screen:
        page = action.page
        logger.info(f"Messages page request: {page}, cached: {len(state.message_cache)}")

        try:
            thread_id = await self._effective_thread_id(state)
            if not thread_id:
                state.move_to(View.MESSAGE_LIST, page)
                return Screen(text=NO_THREAD_TEXT, keyboard=keyboards.no_thread_keyboard())

            if not state.message_cache or state.message_thread_id != thread_id:
                messages = [_as_message(m) for m in await self._host.get_messages(thread_id)]
                state.set_messages(thread_id, messages)
                logger.info(f"Loaded {len(messages)} messages for thread {thread_id}")
        except Exception as e:
            logger.error(f"Error loading messages: {e}", exc_info=True)
            return Screen(notice="Error loading messages")

        state.message_page = page
        state.move_to(View.MESSAGE_LIST, page)

        cache = state.message_cache
        total = len(cache)
        user_count = sum(1 for m in cache if m.role is MessageRole.USER)
        ai_count = sum(1 for m in cache if m.role is MessageRole.ASSISTANT)
        total_pages = max(1, -(-total // keyboards.MESSAGE_PAGE_SIZE))
        # Varying stamp keeps consecutive edits from carrying identical text
        stamp = int(self._clock() * 1000) % 10000

        text = (
            f"💬 Messages ({total} total)\n"
            f"👤 User: {user_count} | 🤖 AI: {ai_count}\n\n"
            f"📄 Page {page + 1}/{total_pages} [{stamp}]"
        )
        return Screen(text=text, keyboard=keyboards.messages_keyboard(cache, page))

    async def _view(self, state: SessionState, action: Action) -> Screen:
        idx = action.arg
        if idx is None or not 0 <= idx < len(state.message_cache):
            return Screen()

        message = state.message_cache[idx]
        body = truncate(extract_text(message.content), MESSAGE_DETAIL_LIMIT)
        created = message.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")

        state.move_to(View.MESSAGE_DETAIL, idx)
        return Screen(
            text=f"{keyboards.role_label(message.role)}\n📅 {created}\n\n{to_hypertext(body)}",
            keyboard=keyboards.message_detail_keyboard(state.message_page),
            html=True,
        )
