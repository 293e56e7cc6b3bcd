"""Tests for command handlers, callback queries, and inline-mode handlers."""

import asyncio
import sys
import os
from unittest.mock import patch, MagicMock

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from bot import content
from bot.callbacks import handle_callback_query
from bot.handlers import (
    build_usage_text,
    handle_close_day,
    handle_inline_keyboard,
    handle_inline_mode,
    handle_keyboard,
    handle_open_day,
    handle_photo,
    handle_remove,
    handle_request,
    handle_throw,
    handle_usage,
)
from bot.inline import build_inline_results, handle_chosen_inline_result, handle_inline_query
from sdk.client import BotClient
from sdk.exceptions import APIException
from sdk.models import (
    CallbackQuery,
    Chat,
    ChatAction,
    ChosenInlineResult,
    InlineKeyboardMarkup,
    InlineQuery,
    Message,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
    User,
)


# ── Fixtures ─────────────────────────────────────────────────────────────────


@pytest.fixture()
def client() -> MagicMock:
    """A BotClient double whose endpoint coroutines are AsyncMocks."""
    return MagicMock(spec=BotClient)


def _make_message(text: str = "/start", chat_id: int = 1000, sender_username: str | None = None) -> Message:
    """Build a minimal SDK Message model for handler tests."""
    sender_chat = None
    if sender_username is not None:
        sender_chat = Chat(id=-100, type="channel", username=sender_username)
    return Message(
        message_id=1,
        date=0,
        chat=Chat(id=chat_id, type="private"),
        from_field=User(id=42, is_bot=False, first_name="Ada"),
        sender_chat=sender_chat,
        text=text,
    )


def _sent_markup(client: MagicMock):
    return client.send_message.await_args.kwargs["reply_markup"]


# ── Keyboards ────────────────────────────────────────────────────────────────


class TestKeyboardCommands:
    """Validate the keyboard-producing commands."""

    @pytest.mark.asyncio
    async def test_inline_keyboard(self, client: MagicMock) -> None:
        with patch("bot.handlers.TYPING_DELAY", 0):
            sent = await handle_inline_keyboard(client, _make_message("/inline_keyboard"))

        client.send_chat_action.assert_awaited_once_with(1000, ChatAction.TYPING)
        assert client.send_message.await_args.args == (1000, "Choose")
        markup = _sent_markup(client)
        assert isinstance(markup, InlineKeyboardMarkup)
        assert [[b.text for b in row] for row in markup.inline_keyboard] == [["1.1", "1.2"], ["2.1", "2.2"]]
        assert [[b.callback_data for b in row] for row in markup.inline_keyboard] == [["11", "12"], ["21", "22"]]
        assert sent is client.send_message.return_value

    @pytest.mark.asyncio
    async def test_inline_keyboard_waits_typing_delay(self, client: MagicMock) -> None:
        with patch("bot.handlers.asyncio.sleep") as mock_sleep, patch("bot.handlers.TYPING_DELAY", 0.5):
            await handle_inline_keyboard(client, _make_message("/inline_keyboard"))
        mock_sleep.assert_awaited_once_with(0.5)

    @pytest.mark.asyncio
    async def test_keyboard(self, client: MagicMock) -> None:
        await handle_keyboard(client, _make_message("/keyboard"))

        markup = _sent_markup(client)
        assert isinstance(markup, ReplyKeyboardMarkup)
        assert markup.resize_keyboard is True
        assert [[b.text for b in row] for row in markup.keyboard] == [["1.1", "1.2"], ["2.1", "2.2"]]
        assert client.send_message.await_args.args == (1000, "Choose")

    @pytest.mark.asyncio
    async def test_remove(self, client: MagicMock) -> None:
        await handle_remove(client, _make_message("/remove"))

        assert client.send_message.await_args.args == (1000, "Removing keyboard")
        assert isinstance(_sent_markup(client), ReplyKeyboardRemove)

    @pytest.mark.asyncio
    async def test_request(self, client: MagicMock) -> None:
        await handle_request(client, _make_message("/request"))

        (location, contact), = _sent_markup(client).keyboard
        assert location.request_location is True
        assert contact.request_contact is True
        assert client.send_message.await_args.args == (1000, "Who or Where are you?")

    @pytest.mark.asyncio
    async def test_inline_mode(self, client: MagicMock) -> None:
        await handle_inline_mode(client, _make_message("/inline_mode"))

        (button,), = _sent_markup(client).inline_keyboard
        assert button.switch_inline_query_current_chat == ""
        assert client.send_message.await_args.args == (1000, "Press the button to start Inline Query")


# ── /photo ───────────────────────────────────────────────────────────────────


class TestPhotoCommand:
    """Validate photo upload and release of the file handle."""

    @pytest.fixture()
    def photo_path(self, tmp_path):
        path = tmp_path / "tux.png"
        path.write_bytes(b"\x89PNG")
        with patch("bot.handlers.PHOTO_PATH", str(path)):
            yield path

    @pytest.mark.asyncio
    async def test_sends_photo_and_closes_file(self, client: MagicMock, photo_path) -> None:
        seen = {}

        async def _send_photo(chat_id, photo, filename, caption=None, reply_markup=None):
            seen["photo"] = photo
            seen["open_during_send"] = not photo.closed
            return MagicMock()

        client.send_photo.side_effect = _send_photo
        await handle_photo(client, _make_message("/photo"))

        client.send_chat_action.assert_awaited_once_with(1000, ChatAction.UPLOAD_PHOTO)
        kwargs = client.send_photo.await_args.kwargs
        assert kwargs["filename"] == "tux.png"
        assert kwargs["caption"] == "Nice Picture"
        assert seen["open_during_send"] is True
        assert seen["photo"].closed is True

    @pytest.mark.asyncio
    async def test_file_closed_when_send_fails(self, client: MagicMock, photo_path) -> None:
        handles = []

        async def _send_photo(chat_id, photo, **kwargs):
            handles.append(photo)
            raise APIException(400, {"description": "Bad Request: wrong file"})

        client.send_photo.side_effect = _send_photo
        with pytest.raises(APIException):
            await handle_photo(client, _make_message("/photo"))
        assert handles[0].closed is True

    @pytest.mark.asyncio
    async def test_file_closed_when_cancelled(self, client: MagicMock, photo_path) -> None:
        handles = []

        async def _send_photo(chat_id, photo, **kwargs):
            handles.append(photo)
            raise asyncio.CancelledError()

        client.send_photo.side_effect = _send_photo
        with pytest.raises(asyncio.CancelledError):
            await handle_photo(client, _make_message("/photo"))
        assert handles[0].closed is True

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, client: MagicMock, tmp_path) -> None:
        with patch("bot.handlers.PHOTO_PATH", str(tmp_path / "missing.png")):
            with pytest.raises(FileNotFoundError):
                await handle_photo(client, _make_message("/photo"))
        client.send_photo.assert_not_awaited()


# ── Shift commands ───────────────────────────────────────────────────────────


class TestShiftCommands:
    """Validate /open_day and /close_day."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["@lesenokkk7", "@UtkirHawk"])
    async def test_open_day_greets_known_senders(self, client: MagicMock, username: str) -> None:
        await handle_open_day(client, _make_message("/open_day", sender_username=username))

        assert client.send_message.await_args.args == (1000, content.OPEN_DAY_GREETING)
        assert isinstance(_sent_markup(client), ReplyKeyboardRemove)

    @pytest.mark.asyncio
    async def test_open_day_posts_report_for_other_senders(self, client: MagicMock) -> None:
        await handle_open_day(client, _make_message("/open_day", sender_username="@someone"))

        text = client.send_message.await_args.args[1]
        assert text.startswith("ОТКРЫТИЕ СМЕНЫ")
        assert text == content.load_open_day_report()

    @pytest.mark.asyncio
    async def test_open_day_without_sender_chat(self, client: MagicMock) -> None:
        await handle_open_day(client, _make_message("/open_day"))
        assert client.send_message.await_args.args[1].startswith("ОТКРЫТИЕ СМЕНЫ")

    @pytest.mark.asyncio
    async def test_close_day(self, client: MagicMock) -> None:
        await handle_close_day(client, _make_message("/close_day"))

        assert client.send_message.await_args.args == (1000, "Пора домой! ")
        assert isinstance(_sent_markup(client), ReplyKeyboardRemove)


# ── Usage and /throw ─────────────────────────────────────────────────────────


class TestUsageAndThrow:
    """Validate the fallback handler and the deliberate failure."""

    def test_usage_text_lists_visible_commands(self) -> None:
        text = build_usage_text()
        assert text.startswith("Usage:\n")
        assert text.endswith("\n")
        for command in ("/inline_keyboard", "/keyboard", "/remove", "/photo", "/request",
                        "/inline_mode", "/open_day", "/close_day"):
            assert command in text
        assert "/throw" not in text
        assert "- send a photo" in text

    @pytest.mark.asyncio
    async def test_usage_handler(self, client: MagicMock) -> None:
        await handle_usage(client, _make_message("hello"))

        assert client.send_message.await_args.args == (1000, build_usage_text())
        assert isinstance(_sent_markup(client), ReplyKeyboardRemove)

    @pytest.mark.asyncio
    async def test_throw_raises_index_error(self, client: MagicMock) -> None:
        with pytest.raises(IndexError):
            await handle_throw(client, _make_message("/throw"))
        client.send_message.assert_not_awaited()


# ── Callback queries ─────────────────────────────────────────────────────────


class TestCallbackQuery:
    """Validate inline keyboard callback handling."""

    def _callback(self, with_message: bool = True) -> CallbackQuery:
        return CallbackQuery(
            id="cb1",
            from_field=User(id=42, is_bot=False, first_name="Ada"),
            chat_instance="ci",
            data="12",
            message=_make_message("Choose", chat_id=-500) if with_message else None,
        )

    @pytest.mark.asyncio
    async def test_answers_then_echoes_to_chat(self, client: MagicMock) -> None:
        await handle_callback_query(client, self._callback())

        client.answer_callback_query.assert_awaited_once_with("cb1", "Received 12")
        client.send_message.assert_awaited_once_with(-500, "Received 12")

    @pytest.mark.asyncio
    async def test_without_message_echoes_to_user(self, client: MagicMock) -> None:
        await handle_callback_query(client, self._callback(with_message=False))
        client.send_message.assert_awaited_once_with(42, "Received 12")

    @pytest.mark.asyncio
    async def test_send_failure_after_answer_propagates(self, client: MagicMock) -> None:
        client.send_message.side_effect = APIException(403, {"description": "Forbidden"})

        with pytest.raises(APIException):
            await handle_callback_query(client, self._callback())
        client.answer_callback_query.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_missing_data_renders_empty(self, client: MagicMock) -> None:
        callback = self._callback().model_copy(update={"data": None})
        await handle_callback_query(client, callback)

        client.answer_callback_query.assert_awaited_once_with("cb1", "Received ")
        client.send_message.assert_awaited_once_with(-500, "Received ")


# ── Inline mode ──────────────────────────────────────────────────────────────


class TestInlineMode:
    """Validate inline queries and chosen inline results."""

    def test_results(self) -> None:
        (article,) = build_inline_results()
        assert article.id == "1"
        assert article.title == "TgBots"
        assert article.input_message_content.message_text == "hello"

    @pytest.mark.asyncio
    async def test_inline_query_answer(self, client: MagicMock) -> None:
        query = InlineQuery(id="iq1", from_field=User(id=42, is_bot=False, first_name="Ada"), query="anything")
        await handle_inline_query(client, query)

        args, kwargs = client.answer_inline_query.await_args
        assert args[0] == "iq1"
        assert args[1] == build_inline_results()
        assert kwargs == {"cache_time": 0, "is_personal": True}

    @pytest.mark.asyncio
    async def test_chosen_inline_result(self, client: MagicMock) -> None:
        chosen = ChosenInlineResult(result_id="1", from_field=User(id=42, is_bot=False, first_name="Ada"), query="x")
        await handle_chosen_inline_result(client, chosen)
        client.send_message.assert_awaited_once_with(42, "You chose result with Id: 1")
