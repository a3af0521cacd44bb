"""Routes one inbound update to the command handler or the navigation engine."""

import logging
import time
from typing import Callable

from telegram_bridge.host.interfaces import Notifier
from telegram_bridge.models import InboundCallback, InboundMessage, InboundUpdate
from telegram_bridge.navigation import NavigationStateMachine, SessionState, parse_action
from telegram_bridge.navigation import keyboards
from telegram_bridge.navigation.machine import MENU_TEXT
from telegram_bridge.telegram.dispatcher import OutboundDispatcher

logger = logging.getLogger(__name__)

MENU_COMMANDS = {"/start", "/menu"}
FORWARD_PREVIEW_CHARS = 50
FORWARD_NOTICE_MS = 15000


class UpdateRouter:
    """Handles commands, free text and button presses from the bridge chat."""

    def __init__(
        self,
        state: SessionState,
        machine: NavigationStateMachine,
        dispatcher: OutboundDispatcher,
        notifier: Notifier,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.state = state
        self.machine = machine
        self.dispatcher = dispatcher
        self.notifier = notifier
        self._clock = clock

    async def dispatch(self, update: InboundUpdate) -> None:
        if update.callback_query is not None:
            await self.handle_callback(update.callback_query)
        elif update.message is not None:
            await self.handle_message(update.message)

    async def handle_callback(self, query: InboundCallback) -> None:
        """Apply a button press and redraw the menu message in place."""
        if query.message_id is None:
            await self.dispatcher.answer_callback(query.id)
            return

        action = parse_action(query.data)
        try:
            screen = await self.machine.handle(self.state, action)
        except Exception as e:
            logger.error(f"Error handling action {query.data!r}: {e}", exc_info=True)
            await self.dispatcher.answer_callback(query.id, "Error")
            return

        if screen.text is not None:
            await self.dispatcher.edit_or_send(
                query.message_id, screen.text, screen.keyboard, screen.html
            )
        await self.dispatcher.answer_callback(query.id, screen.notice)

    async def handle_message(self, message: InboundMessage) -> None:
        """Handle a text message: slash commands or a note for the host user."""
        if not message.text:
            return
        if message.chat_id != self.dispatcher.chat_id:
            logger.debug(f"Ignoring message from chat {message.chat_id}")
            return

        text = message.text
        logger.info(f"Received: {text[:50]}")

        if text.startswith("/"):
            await self._handle_command(message)
            return

        snippet = text[:FORWARD_PREVIEW_CHARS]
        if len(text) > FORWARD_PREVIEW_CHARS:
            snippet += "..."
        self.notifier.notify(
            f'📨 Telegram message received:\n\n"{snippet}"',
            severity="info",
            duration=FORWARD_NOTICE_MS,
        )
        await self.dispatcher.send_new(
            "✅ Message delivered to the assistant app", keyboards.menu_only()
        )

    async def _handle_command(self, message: InboundMessage) -> None:
        # "/menu@my_bot extra" -> "/menu"
        command = message.text.split()[0].split("@")[0].lower()

        if command in MENU_COMMANDS:
            await self.dispatcher.send_new(MENU_TEXT, keyboards.main_menu())
        elif command == "/ping":
            latency = int(self._clock() * 1000 - message.date.timestamp() * 1000)
            await self.dispatcher.send_new(
                f"🏓 Pong! Latency: {latency}ms", keyboards.menu_only()
            )
        else:
            await self.dispatcher.send_new(
                "Use the buttons below to navigate:", keyboards.main_menu()
            )
