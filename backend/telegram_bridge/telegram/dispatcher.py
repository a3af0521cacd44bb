"""Outbound dispatcher: the only place that writes to the Telegram chat.

Both the poll loop (menu navigation) and the reply relay (assistant replies)
send through here. Neither touches session state from this module.
"""

import logging
from typing import Optional

from telegram import InlineKeyboardMarkup
from telegram.constants import ParseMode

from telegram_bridge.utils.text import to_hypertext, truncate

logger = logging.getLogger(__name__)

ASSISTANT_REPLY_LIMIT = 4000


class OutboundDispatcher:
    """Sends, edits and replaces messages in the configured chat."""

    def __init__(self, transport, chat_id: str, bot_token_set: bool = True) -> None:
        self._transport = transport
        self._chat_id = chat_id
        self._bot_token_set = bot_token_set

    @property
    def chat_id(self) -> str:
        return self._chat_id

    @staticmethod
    def _parse_mode(html: bool) -> Optional[str]:
        return ParseMode.HTML if html else None

    async def send_new(
        self,
        text: str,
        keyboard: Optional[InlineKeyboardMarkup] = None,
        html: bool = False,
    ) -> bool:
        """Post a new message to the chat."""
        if not self._bot_token_set or not self._chat_id:
            logger.error("sendMessage failed: missing token or chat id")
            return False

        response = await self._transport.send_message(
            self._chat_id, text, reply_markup=keyboard, parse_mode=self._parse_mode(html)
        )
        if not response.ok:
            logger.error(f"sendMessage failed: {response.description or 'Unknown error'}")
        return response.ok

    async def edit(
        self,
        message_id: int,
        text: str,
        keyboard: Optional[InlineKeyboardMarkup] = None,
        html: bool = False,
    ) -> bool:
        """Rewrite an existing bot message in place."""
        response = await self._transport.edit_message_text(
            self._chat_id,
            message_id,
            text,
            reply_markup=keyboard,
            parse_mode=self._parse_mode(html),
        )
        if not response.ok:
            logger.error(f"editMessage failed: {response.description or 'Unknown error'}")
        return response.ok

    async def edit_or_send(
        self,
        message_id: int,
        text: str,
        keyboard: Optional[InlineKeyboardMarkup] = None,
        html: bool = False,
    ) -> bool:
        """Edit in place; post a fresh message if Telegram refuses the edit.

        Telegram rejects edits of deleted or stale messages and edits that
        would not change the content.
        """
        if await self.edit(message_id, text, keyboard, html):
            return True
        logger.info("editMessage failed, sending new message")
        return await self.send_new(text, keyboard, html)

    async def replace_and_delete(
        self,
        message_id: int,
        text: str,
        keyboard: Optional[InlineKeyboardMarkup] = None,
        html: bool = False,
    ) -> bool:
        """Send ``text`` as a new message, then drop the old one.

        The old message is only deleted once the new one is confirmed sent.
        """
        sent = await self.send_new(text, keyboard, html)
        if sent:
            response = await self._transport.delete_message(self._chat_id, message_id)
            if not response.ok:
                logger.debug(f"deleteMessage ignored: {response.description}")
        return sent

    async def answer_callback(self, callback_id: str, text: Optional[str] = None) -> None:
        await self._transport.answer_callback(callback_id, text)

    async def send_assistant_reply(self, text: str) -> bool:
        """Relay an assistant reply, capped and formatted as HTML."""
        return await self.send_new(
            to_hypertext(truncate(text, ASSISTANT_REPLY_LIMIT)), html=True
        )
