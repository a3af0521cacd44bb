"""Relays finished assistant replies from the host into the Telegram chat."""

import logging
from typing import Any

from telegram_bridge.models import ReplyEvent
from telegram_bridge.navigation import SessionState
from telegram_bridge.telegram.dispatcher import OutboundDispatcher
from telegram_bridge.utils.text import extract_text

logger = logging.getLogger(__name__)


class ReplyRelay:
    """Handler for the host's ``chat.message.didReceive`` event.

    Reads ``selected_thread_id`` but never writes session state.
    """

    def __init__(self, state: SessionState, dispatcher: OutboundDispatcher) -> None:
        self._state = state
        self._dispatcher = dispatcher

    async def __call__(self, payload: Any) -> None:
        event = payload if isinstance(payload, ReplyEvent) else ReplyEvent.model_validate(payload)

        selected = self._state.selected_thread_id
        if selected and event.thread_id != selected:
            return
        text = extract_text(event.response.content)
        if not text:
            return

        logger.info(f"Relaying assistant reply from thread {event.thread_id}")
        await self._dispatcher.send_assistant_reply(text)
