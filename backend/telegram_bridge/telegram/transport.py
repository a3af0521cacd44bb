"""Bot API transport built on python-telegram-bot.

Every call returns an :class:`ApiResult` instead of raising, so a flaky
network or a rejected edit never escapes into the navigation layer.
"""

import logging
from typing import Any, Optional, Sequence

from telegram import Bot, BotCommand, InlineKeyboardMarkup, Update
from telegram.error import TelegramError

from telegram_bridge.config import Settings
from telegram_bridge.errors import ConfigurationError
from telegram_bridge.models import ApiResult, InboundCallback, InboundMessage, InboundUpdate

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = ("message", "callback_query")

BOT_COMMANDS = (
    ("start", "🚀 Start / Show menu"),
    ("menu", "📱 Show main menu"),
    ("ping", "🏓 Test connection"),
)


def to_inbound(update: Update) -> InboundUpdate:
    """Convert a python-telegram-bot ``Update`` into the bridge model."""
    message = None
    callback = None

    if update.message is not None:
        message = InboundMessage(
            message_id=update.message.message_id,
            chat_id=str(update.message.chat.id),
            date=update.message.date,
            text=update.message.text,
        )

    query = update.callback_query
    if query is not None:
        callback = InboundCallback(
            id=query.id,
            data=query.data or "",
            message_id=query.message.message_id if query.message else None,
        )

    return InboundUpdate(
        update_id=update.update_id, message=message, callback_query=callback
    )


class TelegramTransport:
    """Thin result-returning wrapper over ``telegram.Bot``."""

    def __init__(self, bot: Bot) -> None:
        self._bot = bot

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelegramTransport":
        if not settings.telegram_bot_token:
            raise ConfigurationError("TELEGRAM_BOT_TOKEN is required for the bridge")
        return cls(Bot(token=settings.telegram_bot_token))

    async def _call(self, method: str, coro: Any) -> ApiResult:
        try:
            return ApiResult.success(await coro)
        except TelegramError as e:
            logger.error(f"{method} failed: {e}")
            return ApiResult.failure(str(e))

    async def initialize(self) -> ApiResult:
        return await self._call("initialize", self._bot.initialize())

    async def shutdown(self) -> None:
        try:
            await self._bot.shutdown()
        except TelegramError as e:
            logger.warning(f"Bot shutdown failed: {e}")

    async def send_message(
        self,
        chat_id: str,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
        parse_mode: Optional[str] = None,
    ) -> ApiResult:
        return await self._call(
            "sendMessage",
            self._bot.send_message(
                chat_id=chat_id,
                text=text,
                reply_markup=reply_markup,
                parse_mode=parse_mode,
            ),
        )

    async def edit_message_text(
        self,
        chat_id: str,
        message_id: int,
        text: str,
        reply_markup: Optional[InlineKeyboardMarkup] = None,
        parse_mode: Optional[str] = None,
    ) -> ApiResult:
        return await self._call(
            "editMessageText",
            self._bot.edit_message_text(
                text=text,
                chat_id=chat_id,
                message_id=message_id,
                reply_markup=reply_markup,
                parse_mode=parse_mode,
            ),
        )

    async def delete_message(self, chat_id: str, message_id: int) -> ApiResult:
        return await self._call(
            "deleteMessage",
            self._bot.delete_message(chat_id=chat_id, message_id=message_id),
        )

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> ApiResult:
        return await self._call(
            "answerCallbackQuery",
            self._bot.answer_callback_query(callback_query_id=callback_id, text=text),
        )

    async def get_updates(
        self,
        offset: int,
        timeout: int,
        allowed_updates: Sequence[str] = ALLOWED_UPDATES,
    ) -> ApiResult:
        """Long-poll for updates; ``result`` holds a list of ``InboundUpdate``."""
        response = await self._call(
            "getUpdates",
            self._bot.get_updates(
                offset=offset, timeout=timeout, allowed_updates=list(allowed_updates)
            ),
        )
        if response.ok:
            response.result = [to_inbound(update) for update in response.result or ()]
        return response

    async def delete_webhook(self) -> ApiResult:
        return await self._call(
            "deleteWebhook", self._bot.delete_webhook(drop_pending_updates=False)
        )

    async def set_commands(self, commands: Sequence[tuple[str, str]] = BOT_COMMANDS) -> ApiResult:
        return await self._call(
            "setMyCommands",
            self._bot.set_my_commands(
                [BotCommand(command, description) for command, description in commands]
            ),
        )
