"""Tests for the python-telegram-bot transport wrapper."""

from datetime import datetime, timezone

import pytest
from telegram import CallbackQuery, Chat, Message, Update, User
from telegram.error import BadRequest, NetworkError

from telegram_bridge.config import Settings
from telegram_bridge.errors import ConfigurationError
from telegram_bridge.telegram.transport import TelegramTransport, to_inbound

SENT_AT = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def ptb_message(text: str = "/ping") -> Message:
    return Message(
        message_id=9,
        date=SENT_AT,
        chat=Chat(id=4242, type="private"),
        from_user=User(id=1, first_name="Ana", is_bot=False),
        text=text,
    )


class FakeBot:
    def __init__(self) -> None:
        self.updates: tuple[Update, ...] = ()
        self.kwargs: dict = {}

    async def get_updates(self, **kwargs):
        self.kwargs = kwargs
        return self.updates

    async def edit_message_text(self, **kwargs):
        raise BadRequest("Message is not modified")

    async def send_message(self, **kwargs):
        raise NetworkError("connection reset")

    async def answer_callback_query(self, **kwargs):
        return True


def test_to_inbound_converts_messages() -> None:
    update = to_inbound(Update(update_id=10, message=ptb_message()))
    assert update.update_id == 10
    assert update.message.chat_id == "4242"
    assert update.message.text == "/ping"
    assert update.message.date == SENT_AT
    assert update.callback_query is None


def test_to_inbound_converts_callbacks() -> None:
    query = CallbackQuery(
        id="q1",
        from_user=User(id=1, first_name="Ana", is_bot=False),
        chat_instance="ci",
        message=ptb_message(),
        data="threads:1",
    )
    update = to_inbound(Update(update_id=11, callback_query=query))
    assert update.callback_query.id == "q1"
    assert update.callback_query.data == "threads:1"
    assert update.callback_query.message_id == 9


@pytest.mark.asyncio
async def test_get_updates_returns_inbound_models() -> None:
    bot = FakeBot()
    bot.updates = (Update(update_id=3, message=ptb_message("hi")),)
    transport = TelegramTransport(bot)

    response = await transport.get_updates(offset=4, timeout=30)
    assert response.ok
    assert [u.update_id for u in response.result] == [3]
    assert bot.kwargs == {"offset": 4, "timeout": 30, "allowed_updates": ["message", "callback_query"]}


@pytest.mark.asyncio
async def test_errors_become_failed_results() -> None:
    """Telegram and network errors never escape the transport."""
    transport = TelegramTransport(FakeBot())

    edited = await transport.edit_message_text("4242", 9, "same text")
    assert not edited.ok
    assert "not modified" in edited.description

    sent = await transport.send_message("4242", "hello")
    assert not sent.ok
    assert "connection reset" in sent.description

    answered = await transport.answer_callback("q1")
    assert answered.ok


def test_from_settings_requires_token() -> None:
    with pytest.raises(ConfigurationError):
        TelegramTransport.from_settings(Settings(_env_file=None, telegram_bot_token=""))
