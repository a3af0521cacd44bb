"""Long-polling session loop.

Pulls update batches from Telegram, advances the update cursor, and feeds
each update to the router one at a time. Runs as a single tracked
``asyncio.Task`` so :meth:`SessionLoop.stop` can cancel it outright.
"""

import asyncio
import logging
from typing import Optional

from telegram_bridge.bridge.router import UpdateRouter
from telegram_bridge.navigation import SessionState
from telegram_bridge.host.interfaces import KeyValueStore
from telegram_bridge.navigation.machine import SELECTED_THREAD_KEY

logger = logging.getLogger(__name__)


class SessionLoop:
    """Single-flight getUpdates loop for one bridge session."""

    def __init__(
        self,
        transport,
        router: UpdateRouter,
        state: SessionState,
        store: KeyValueStore,
        interval: float = 2.0,
        long_poll_timeout: int = 30,
        configured: bool = True,
    ) -> None:
        self._transport = transport
        self._router = router
        self._state = state
        self._store = store
        self._interval = interval
        self._long_poll_timeout = long_poll_timeout
        self._configured = configured
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._state.polling_active

    async def start(self) -> bool:
        """Start polling; a no-op when already running or without a bot token and chat id."""
        if self._state.polling_active or not self._configured:
            return False
        self._state.polling_active = True

        try:
            await self._transport.delete_webhook()
            await self._transport.set_commands()
        except Exception as e:
            logger.error(f"Failed to prepare polling: {e}", exc_info=True)
            self._state.polling_active = False
            return False
        await self._restore_selection()

        if not self._state.polling_active:
            # stopped while the setup calls were in flight
            return False
        self._task = asyncio.create_task(self._run())
        logger.info("✅ Telegram bridge is running and polling for updates!")
        return True

    async def _restore_selection(self) -> None:
        try:
            saved = await self._store.get(SELECTED_THREAD_KEY)
        except Exception as e:
            logger.debug(f"No saved thread restored: {e}")
            return
        if saved:
            self._state.selected_thread_id = saved
            logger.info(f"Loaded saved thread: {saved}")

    async def poll_once(self) -> int:
        """Fetch one batch and dispatch it; returns the number of updates seen."""
        response = await self._transport.get_updates(
            offset=self._state.update_cursor + 1, timeout=self._long_poll_timeout
        )
        if not response.ok:
            return 0

        updates = response.result or []
        for update in updates:
            # Acknowledge before dispatch so a failing update is never replayed
            self._state.advance_cursor(update.update_id)
            try:
                await self._router.dispatch(update)
            except Exception as e:
                logger.error(f"Error processing update {update.update_id}: {e}", exc_info=True)
        return len(updates)

    async def _run(self) -> None:
        while self._state.polling_active:
            try:
                await self.poll_once()
            except Exception as e:
                logger.error(f"Polling error: {e}", exc_info=True)
            if not self._state.polling_active:
                break
            await asyncio.sleep(self._interval)

    async def stop(self) -> None:
        """Stop polling and cancel the pending cycle; safe to call twice."""
        self._state.polling_active = False
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Telegram bridge polling stopped.")
