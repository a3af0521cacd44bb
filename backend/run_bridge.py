"""Standalone script to run the Telegram bridge.

Run it next to the assistant backend so it can read the same MongoDB:
    python backend/run_bridge.py

Or, once installed:
    telegram-bridge
"""

import asyncio
import logging
import signal

from pymongo.errors import PyMongoError

from telegram_bridge.bridge import TelegramBridge
from telegram_bridge.config import settings
from telegram_bridge.dependencies import get_chat_host, get_event_bus
from telegram_bridge.errors import ConfigurationError
from telegram_bridge.host import LoggingNotifier
from telegram_bridge.host.mongo import MongoKeyValueStore, MongoReplyWatcher
from telegram_bridge.telegram import TelegramTransport

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("telegram_bridge.log"),
        ],
    )
    # httpx logs every long-poll request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def main() -> None:
    """Run the bridge until interrupted."""
    logger.info("=" * 50)
    logger.info("Starting Telegram Bridge...")
    logger.info("=" * 50)

    notifier = LoggingNotifier()
    try:
        transport = TelegramTransport.from_settings(settings)
    except ConfigurationError as e:
        notifier.notify(
            f"Telegram Bridge: Please configure Bot Token and Chat ID ({e})",
            severity="warning",
        )
        return

    host = get_chat_host()
    bus = get_event_bus()
    watcher = MongoReplyWatcher(host, bus, interval=settings.reply_watch_interval_ms / 1000)
    bridge = TelegramBridge(
        settings, transport, host, MongoKeyValueStore(host), bus, notifier
    )

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:
            # Windows: fall back to KeyboardInterrupt
            pass

    try:
        try:
            await host.initialize()
            await watcher.start()
        except PyMongoError as e:
            logger.error(f"MongoDB unavailable, thread browsing will report errors: {e}")
        await transport.initialize()
        await bridge.activate()
        await stop_event.wait()
    finally:
        logger.info("Shutting down Telegram Bridge...")
        await bridge.dispose()
        await watcher.stop()
        await transport.shutdown()
        await host.close()
        logger.info("Bridge shut down cleanly")


def run() -> None:
    configure_logging()
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received interrupt signal.")


if __name__ == "__main__":
    run()
