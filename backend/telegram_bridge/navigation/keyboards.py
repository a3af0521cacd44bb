"""Inline keyboard layouts for every navigation screen.

All functions here are pure: the same state and page always yield the same
layout.
"""

from typing import Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from telegram_bridge.models import MessageRole, MessageSummary, ThreadSummary
from telegram_bridge.navigation.actions import Verb, callback
from telegram_bridge.utils.text import extract_text, preview

THREAD_PAGE_SIZE = 5
MESSAGE_PAGE_SIZE = 5
THREAD_TITLE_MAX = 25
SELECTED_MARKER = " ✅"

ROLE_GLYPHS = {
    MessageRole.USER: "👤",
    MessageRole.ASSISTANT: "🤖",
}
ROLE_LABELS = {
    MessageRole.USER: "👤 User",
    MessageRole.ASSISTANT: "🤖 Assistant",
}


def role_glyph(role: MessageRole) -> str:
    return ROLE_GLYPHS.get(role, "⚙️")


def role_label(role: MessageRole) -> str:
    return ROLE_LABELS.get(role, "⚙️ System")


def _menu_row() -> list[InlineKeyboardButton]:
    return [InlineKeyboardButton("🏠 Menu", callback_data=callback(Verb.MENU))]


def main_menu() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("📋 Threads", callback_data=callback(Verb.THREADS, 0)),
                InlineKeyboardButton("💬 Messages", callback_data=callback(Verb.MESSAGES, 0)),
            ],
            [
                InlineKeyboardButton("📍 Current", callback_data=callback(Verb.CURRENT)),
                InlineKeyboardButton("🔄 Refresh", callback_data=callback(Verb.REFRESH)),
            ],
            [InlineKeyboardButton("🐛 Debug", callback_data=callback(Verb.DEBUG))],
        ]
    )


def menu_only() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup([_menu_row()])


def thread_window(total: int, page: int) -> range:
    """Cache indices shown on thread page ``page``."""
    start = page * THREAD_PAGE_SIZE
    return range(min(start, total), min(start + THREAD_PAGE_SIZE, total))


def message_window(total: int, page: int) -> range:
    """Cache indices shown on message page ``page``, oldest first.

    Page 0 holds the newest messages; higher pages walk back in time.
    """
    start = max(0, total - (page + 1) * MESSAGE_PAGE_SIZE)
    end = max(0, total - page * MESSAGE_PAGE_SIZE)
    return range(start, end)


def _short_title(title: str) -> str:
    if len(title) > THREAD_TITLE_MAX:
        return title[: THREAD_TITLE_MAX - 3] + "..."
    return title


def threads_keyboard(
    threads: list[ThreadSummary], page: int, selected_id: Optional[str]
) -> InlineKeyboardMarkup:
    window = thread_window(len(threads), page)
    rows = []
    for idx in window:
        thread = threads[idx]
        marker = SELECTED_MARKER if thread.id == selected_id else ""
        rows.append(
            [
                InlineKeyboardButton(
                    f"{idx + 1}. {_short_title(thread.title)}{marker}",
                    callback_data=callback(Verb.SELECT, idx),
                )
            ]
        )

    nav = []
    if page > 0:
        nav.append(InlineKeyboardButton("⬅️ Prev", callback_data=callback(Verb.THREADS, page - 1)))
    if (page + 1) * THREAD_PAGE_SIZE < len(threads):
        nav.append(InlineKeyboardButton("Next ➡️", callback_data=callback(Verb.THREADS, page + 1)))
    if nav:
        rows.append(nav)

    rows.append(_menu_row())
    return InlineKeyboardMarkup(rows)


def messages_keyboard(messages: list[MessageSummary], page: int) -> InlineKeyboardMarkup:
    window = message_window(len(messages), page)
    rows = []
    for idx in reversed(window):
        message = messages[idx]
        label = f"{role_glyph(message.role)} {preview(extract_text(message.content))}"
        rows.append([InlineKeyboardButton(label, callback_data=callback(Verb.VIEW, idx))])

    nav = []
    if page > 0:
        nav.append(InlineKeyboardButton("⬅ Newer", callback_data=callback(Verb.MESSAGES, page - 1)))
    if window.start > 0:
        nav.append(InlineKeyboardButton("Older ➡", callback_data=callback(Verb.MESSAGES, page + 1)))
    if nav:
        rows.append(nav)

    rows.append(_menu_row())
    return InlineKeyboardMarkup(rows)


def thread_selected_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton("💬 View Messages", callback_data=callback(Verb.MESSAGES, 0))],
            _menu_row(),
        ]
    )


def no_thread_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton("📋 Select Thread", callback_data=callback(Verb.THREADS, 0))]]
    )


def message_detail_keyboard(page: int) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton("⬅️ Back to Messages", callback_data=callback(Verb.MESSAGES, page))],
            _menu_row(),
        ]
    )


def current_thread_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton("💬 View Messages", callback_data=callback(Verb.MESSAGES, 0))],
            [InlineKeyboardButton("📋 Change Thread", callback_data=callback(Verb.THREADS, 0))],
            _menu_row(),
        ]
    )


def debug_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton("🔄 Refresh Cache", callback_data=callback(Verb.REFRESH))],
            _menu_row(),
        ]
    )
