"""Session state shared by every handler of one bridge session."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from telegram_bridge.models import MessageSummary, ThreadSummary


class View(str, Enum):
    """Screens the navigation state machine can be in."""

    MENU = "menu"
    THREAD_LIST = "thread_list"
    THREAD_DETAIL = "thread_detail"
    MESSAGE_LIST = "message_list"
    MESSAGE_DETAIL = "message_detail"
    CURRENT_THREAD = "current_thread"
    DEBUG = "debug"


class SessionState(BaseModel):
    """Mutable navigation and polling state.

    Owned by the session loop and only mutated while a single update is
    being dispatched, so it needs no locking.

    ``message_page`` is only meaningful against the current
    ``message_cache``; every transition that replaces or clears the cache
    resets it to 0.
    """

    selected_thread_id: Optional[str] = None
    thread_cache: list[ThreadSummary] = Field(default_factory=list)
    message_cache: list[MessageSummary] = Field(default_factory=list)
    message_thread_id: Optional[str] = None
    message_page: int = 0
    update_cursor: int = 0
    polling_active: bool = False

    view: View = View.MENU
    view_arg: Optional[int] = None

    def advance_cursor(self, update_id: int) -> int:
        """Move the update cursor forward; it never moves back."""
        self.update_cursor = max(self.update_cursor, update_id)
        return self.update_cursor

    def set_messages(self, thread_id: str, messages: list[MessageSummary]) -> None:
        self.message_cache = list(messages)
        self.message_thread_id = thread_id
        self.message_page = 0

    def clear_messages(self) -> None:
        self.message_cache = []
        self.message_thread_id = None
        self.message_page = 0

    def reset(self) -> None:
        """Drop both caches and the selected thread."""
        self.thread_cache = []
        self.clear_messages()
        self.selected_thread_id = None

    def move_to(self, view: View, arg: Optional[int] = None) -> None:
        self.view = view
        self.view_arg = arg
