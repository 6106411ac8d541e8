"""Tests for TelegramAdapter."""

from unittest.mock import AsyncMock, patch

import pytest
from telegram import Bot
from telegram.error import NetworkError
from telegram.request import HTTPXRequest

from app.adapters.telegram import TelegramAdapter, TelegramBotFactory, parse_chat_id
from app.config import get_settings
from app.constants.chat import Channel
from app.exceptions import InvalidPayloadError, InvalidRecipientError, SendError
from app.services.platform_service import PlatformService
from tests.fixtures.webhook_payloads import minimal_telegram_update

FAKE_TOKEN = "123456:AAHdqTcvCH1vGWJxfSeofSAs0K5P"


@pytest.fixture
def telegram_adapter(db, bot_factory):
    return TelegramAdapter(PlatformService(db, get_settings()), bot_factory)


def test_verify_webhook_no_secret(telegram_adapter):
    assert telegram_adapter.verify_webhook({}) is True
    assert telegram_adapter.verify_webhook({"X-Telegram-Bot-Api-Secret-Token": "x"}) is True


def test_verify_webhook_with_secret(db, bot_factory):
    adapter = TelegramAdapter(
        PlatformService(db), bot_factory, webhook_secret="s3cret"
    )
    assert adapter.verify_webhook({"X-Telegram-Bot-Api-Secret-Token": "s3cret"}) is True
    assert adapter.verify_webhook({"x-telegram-bot-api-secret-token": "s3cret"}) is True
    assert adapter.verify_webhook({"X-Telegram-Bot-Api-Secret-Token": "nope"}) is False
    assert adapter.verify_webhook({}) is False


def test_parse_webhook_text(telegram_adapter):
    messages = telegram_adapter.parse_webhook(minimal_telegram_update())
    assert len(messages) == 1
    inbound = messages[0]
    assert inbound.channel == Channel.TELEGRAM
    assert inbound.external_user_id == "789"
    assert inbound.display_name == "Test User"
    assert inbound.text == "hello"
    assert inbound.message_id == "456"


def test_parse_webhook_first_name_only(telegram_adapter):
    update = minimal_telegram_update()
    del update["message"]["from"]["last_name"]
    assert telegram_adapter.parse_webhook(update)[0].display_name == "Test"


@pytest.mark.parametrize("text", [None, "", "   "])
def test_parse_webhook_without_text_is_empty(telegram_adapter, text):
    assert telegram_adapter.parse_webhook(minimal_telegram_update(text)) == []


def test_parse_webhook_update_without_message(telegram_adapter):
    assert telegram_adapter.parse_webhook({"update_id": 1, "edited_message": {}}) == []


def test_parse_webhook_wrong_shape(telegram_adapter):
    with pytest.raises(InvalidPayloadError):
        telegram_adapter.parse_webhook({"message": {"text": "hi"}})


@pytest.mark.parametrize(
    "recipient, expected",
    [(789, 789), ("789", 789), (" -100123 ", -100123)],
)
def test_parse_chat_id(recipient, expected):
    assert parse_chat_id(recipient) == expected


@pytest.mark.parametrize("recipient", ["abc", "", True, "12.5"])
def test_parse_chat_id_invalid(recipient):
    with pytest.raises(InvalidRecipientError, match="invalid chat ID"):
        parse_chat_id(recipient)


@pytest.mark.asyncio
async def test_send_uses_bot(telegram_adapter, bot_factory, telegram_bot):
    result = await telegram_adapter.send("789", "Hi there")

    assert result.success is True
    assert result.platform_message_id == "901"
    bot_factory.assert_called_once_with(FAKE_TOKEN)
    telegram_bot.send_message.assert_awaited_once_with(chat_id=789, text="Hi there")


@pytest.mark.asyncio
async def test_send_invalid_recipient_makes_no_call(telegram_adapter, telegram_bot):
    with pytest.raises(InvalidRecipientError):
        await telegram_adapter.send("not-a-chat", "hi")
    telegram_bot.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_send_telegram_error(telegram_adapter, telegram_bot):
    telegram_bot.send_message.side_effect = NetworkError("timed out")
    with pytest.raises(SendError) as exc_info:
        await telegram_adapter.send(789, "hi")
    assert exc_info.value.status_code is None
    assert "timed out" in exc_info.value.body


@pytest.mark.asyncio
async def test_send_skipped_when_disabled(db, bot_factory, telegram_bot, monkeypatch):
    monkeypatch.setenv("TELEGRAM_ENABLED", "false")
    adapter = TelegramAdapter(PlatformService(db, get_settings()), bot_factory)

    result = await adapter.send(789, "hi")
    assert result.skipped is True
    telegram_bot.send_message.assert_not_called()


def test_bot_factory_caches_one_bot_per_token():
    factory = TelegramBotFactory(timeout_seconds=5)
    first = factory(FAKE_TOKEN)
    assert isinstance(first, Bot)
    assert factory(FAKE_TOKEN) is first
    assert factory("654321:OTHERTOKEN") is not first


@pytest.mark.asyncio
async def test_bot_factory_shutdown_closes_requests():
    factory = TelegramBotFactory(timeout_seconds=5)
    first = factory(FAKE_TOKEN)
    factory("654321:OTHERTOKEN")

    with patch.object(HTTPXRequest, "shutdown", AsyncMock()) as shutdown:
        await factory.shutdown()

    assert shutdown.await_count == 2
    assert factory(FAKE_TOKEN) is not first
