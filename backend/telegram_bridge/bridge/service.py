"""Bridge lifecycle: wires the components together and owns activate/dispose."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from telegram_bridge.bridge.relay import ReplyRelay
from telegram_bridge.bridge.router import UpdateRouter
from telegram_bridge.bridge.session_loop import SessionLoop
from telegram_bridge.config import Settings
from telegram_bridge.host.events import REPLY_EVENT
from telegram_bridge.host.interfaces import ChatHost, EventSource, KeyValueStore, Notifier
from telegram_bridge.navigation import NavigationStateMachine, SessionState
from telegram_bridge.telegram.dispatcher import OutboundDispatcher

logger = logging.getLogger(__name__)


class TelegramBridge:
    """One bridge session between the host app and a Telegram chat.

    Lifecycle:
        bridge = TelegramBridge(settings, transport, host, store, events, notifier)
        await bridge.activate()   # polling starts after the activation delay
        ...
        await bridge.dispose()
    """

    def __init__(
        self,
        settings: Settings,
        transport,
        host: ChatHost,
        store: KeyValueStore,
        events: EventSource,
        notifier: Notifier,
    ) -> None:
        self.settings = settings
        self.notifier = notifier
        self._events = events
        bot_token_set = bool(settings.telegram_bot_token)

        self.state = SessionState(selected_thread_id=settings.default_thread_id or None)
        self.dispatcher = OutboundDispatcher(
            transport, settings.telegram_chat_id, bot_token_set=bot_token_set
        )
        self.machine = NavigationStateMachine(
            host,
            store,
            chat_id=settings.telegram_chat_id,
            bot_token_set=bot_token_set,
        )
        self.router = UpdateRouter(self.state, self.machine, self.dispatcher, notifier)
        self.loop = SessionLoop(
            transport,
            self.router,
            self.state,
            store,
            interval=settings.polling_interval,
            long_poll_timeout=settings.long_poll_timeout,
            configured=settings.is_configured,
        )
        self.relay = ReplyRelay(self.state, self.dispatcher)

        self._subscription = None
        self._startup: Optional[asyncio.Task] = None

    async def activate(self) -> None:
        logger.info("Telegram Bridge activating...")

        if not self.settings.is_configured:
            logger.warning("Telegram bot token or chat id not configured")
            self.notifier.notify(
                "Telegram Bridge: Please configure Bot Token and Chat ID",
                severity="warning",
            )

        self._subscription = self._events.on(REPLY_EVENT, self.relay)
        self._startup = asyncio.create_task(self._delayed_start())

    async def _delayed_start(self) -> None:
        await asyncio.sleep(max(self.settings.activation_delay_ms, 0) / 1000)
        if await self.loop.start():
            self.notifier.notify("Telegram Bridge active", severity="success")

    async def wait_started(self) -> None:
        """Block until the delayed start has run."""
        if self._startup is not None:
            await asyncio.shield(self._startup)

    async def dispose(self) -> None:
        if self._startup is not None and not self._startup.done():
            self._startup.cancel()
            try:
                await self._startup
            except asyncio.CancelledError:
                pass
        self._startup = None

        await self.loop.stop()

        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
        logger.info("Telegram Bridge disposed")
