"""Command handlers for the bot.

Each public coroutine handles a single slash-command, is registered with
:data:`bot.registry.registry`, and is invoked by the dispatcher in
:mod:`bot.dispatcher` with ``(client, message)``.  Every handler returns the
last message it sent.  Handlers never catch client failures: they propagate
to the transport adapter.  Trailing arguments after the command are ignored.
"""

import asyncio
import contextlib
import os
from typing import AsyncIterator, BinaryIO

from config import PHOTO_CAPTION, PHOTO_PATH, TYPING_DELAY
from sdk.client import BotClient
from sdk.models import (
    ChatAction,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    Message,
    ReplyKeyboardMarkup,
    ReplyKeyboardRemove,
)
from core.logger import BotLogger
from bot import content
from bot.registry import registry

logger = BotLogger.get_logger()


@registry.register("/inline_keyboard", description="send inline keyboard")
async def handle_inline_keyboard(client: BotClient, message: Message) -> Message:
    """Handle /inline_keyboard — show a 2×2 grid of callback buttons.

    Presses are answered by :func:`bot.callbacks.handle_callback_query`.
    """
    chat_id = message.chat.id
    await client.send_chat_action(chat_id, ChatAction.TYPING)

    # Simulate a longer running task.
    await asyncio.sleep(TYPING_DELAY)

    markup = InlineKeyboardMarkup(inline_keyboard=[
        [
            InlineKeyboardButton(text="1.1", callback_data="11"),
            InlineKeyboardButton(text="1.2", callback_data="12"),
        ],
        [
            InlineKeyboardButton(text="2.1", callback_data="21"),
            InlineKeyboardButton(text="2.2", callback_data="22"),
        ],
    ])
    return await client.send_message(chat_id, content.CHOOSE_PROMPT, reply_markup=markup)


@registry.register("/keyboard", description="send custom keyboard")
async def handle_keyboard(client: BotClient, message: Message) -> Message:
    """Handle /keyboard — show a 2×2 custom reply keyboard."""
    markup = ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="1.1"), KeyboardButton(text="1.2")],
            [KeyboardButton(text="2.1"), KeyboardButton(text="2.2")],
        ],
        resize_keyboard=True,
    )
    return await client.send_message(message.chat.id, content.CHOOSE_PROMPT, reply_markup=markup)


@registry.register("/remove", description="remove custom keyboard")
async def handle_remove(client: BotClient, message: Message) -> Message:
    return await client.send_message(
        message.chat.id, content.REMOVE_KEYBOARD_TEXT, reply_markup=ReplyKeyboardRemove(),
    )


@contextlib.asynccontextmanager
async def _open_photo(path: str) -> AsyncIterator[BinaryIO]:
    """Async context manager that yields *path* opened for binary reading.

    The file is opened before the first suspension point and closed on every
    exit path, including send failures and task cancellation.

    Raises:
        OSError: If the file is missing or unreadable.
    """
    fh = open(path, "rb")
    try:
        yield fh
    finally:
        fh.close()
        logger.debug("Closed photo file", extra={"path": path})


@registry.register("/photo", description="send a photo")
async def handle_photo(client: BotClient, message: Message) -> Message:
    """Handle /photo — upload the configured image with a caption."""
    chat_id = message.chat.id
    await client.send_chat_action(chat_id, ChatAction.UPLOAD_PHOTO)

    async with _open_photo(PHOTO_PATH) as photo:
        return await client.send_photo(
            chat_id,
            photo,
            filename=os.path.basename(PHOTO_PATH),
            caption=PHOTO_CAPTION,
        )


@registry.register("/request", description="request location or contact")
async def handle_request(client: BotClient, message: Message) -> Message:
    """Handle /request — offer buttons that share the user's location or contact."""
    markup = ReplyKeyboardMarkup(keyboard=[[
        KeyboardButton(text="Location", request_location=True),
        KeyboardButton(text="Contact", request_contact=True),
    ]])
    return await client.send_message(message.chat.id, content.REQUEST_PROMPT, reply_markup=markup)


@registry.register("/inline_mode", description="send keyboard with Inline Query")
async def handle_inline_mode(client: BotClient, message: Message) -> Message:
    """Handle /inline_mode — offer a button that starts an inline query in this chat."""
    markup = InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(text="Inline Mode", switch_inline_query_current_chat=""),
    ]])
    return await client.send_message(message.chat.id, content.INLINE_MODE_PROMPT, reply_markup=markup)


@registry.register("/throw", description="fail on purpose", hidden=True)
async def handle_throw(client: BotClient, message: Message) -> Message:
    """Handle /throw — fail unconditionally to exercise the error path."""
    raise IndexError(f"Deliberate failure requested in chat {message.chat.id}")


@registry.register("/open_day", description="открытие дня")
async def handle_open_day(client: BotClient, message: Message) -> Message:
    """Handle /open_day — greet known sender chats, otherwise post the shift report."""
    username = message.sender_chat.username if message.sender_chat else None
    greeted = username in content.OPEN_DAY_GREETED_USERNAMES
    text = content.OPEN_DAY_GREETING if greeted else content.load_open_day_report()
    logger.info("Opening shift", extra={"chat_id": message.chat.id, "command": "/open_day", "greeted": greeted})
    return await client.send_message(message.chat.id, text, reply_markup=ReplyKeyboardRemove())


@registry.register("/close_day", description="закрытие дня")
async def handle_close_day(client: BotClient, message: Message) -> Message:
    return await client.send_message(
        message.chat.id, content.CLOSE_DAY_TEXT, reply_markup=ReplyKeyboardRemove(),
    )


def build_usage_text() -> str:
    """Render the help text from every visible registered command."""
    visible = [entry for entry in registry.entries().values() if not entry.hidden]
    width = max((len(entry.command) for entry in visible), default=0)
    lines = ["Usage:"]
    lines.extend(f"{entry.command:<{width}} - {entry.description}" for entry in visible)
    return "\n".join(lines) + "\n"


@registry.register_default
async def handle_usage(client: BotClient, message: Message) -> Message:
    """Fallback for unknown tokens — list the commands and drop any custom keyboard."""
    return await client.send_message(message.chat.id, build_usage_text(), reply_markup=ReplyKeyboardRemove())
