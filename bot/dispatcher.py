"""Update router, message command dispatch, and the long-polling loop.

:func:`process_update` classifies each incoming update by its payload
variant and hands it to exactly one branch.  Nothing here catches handler
failures: they propagate to the transport adapter (:func:`run` or
:mod:`bot.webhook`), which logs them through :mod:`bot.errors`.
"""

import asyncio
import re
from typing import Any

from config import BOT_TOKEN, POLLING_TIMEOUT
from core.logger import BotLogger
from sdk.client import BotClient
from sdk.models import Message, Update, UpdateType
from bot.registry import registry
from bot.callbacks import handle_callback_query
from bot.inline import handle_chosen_inline_result, handle_inline_query
from bot.errors import cooldown, handle_polling_error, log_error

# Import handlers module so @registry.register decorators execute.
import bot.handlers as _handlers  # noqa: F401

logger = BotLogger.get_logger()

_WHITESPACE = re.compile(r"\s+")


def extract_command(text: str) -> str:
    """Return the command token: everything before the first whitespace run."""
    return _WHITESPACE.split(text, maxsplit=1)[0]


async def handle_message(client: BotClient, message: Message) -> Message | None:
    """Dispatch a (possibly edited) message to its command handler.

    Messages without text are ignored and return ``None``.  Otherwise the
    resolved handler's sent message is returned; unknown tokens get the
    usage text.
    """
    logger.info("Receive message", extra={"message_type": message.type, "chat_id": message.chat.id})
    if message.text is None:
        return None

    command = extract_command(message.text)
    logger.debug("Dispatching command", extra={"command": command, "chat_id": message.chat.id})
    sent = await registry.dispatch(command, client, message)
    logger.info("The message was sent", extra={"sent_message_id": sent.message_id, "chat_id": sent.chat.id})
    return sent


async def handle_unknown_update(update: Update) -> None:
    """Log updates the bot has no branch for; never fails."""
    logger.info("Unknown update type", extra={"update_type": update.type.value, "update_id": update.update_id})


async def process_update(client: BotClient, update: Update | dict[str, Any]) -> None:
    """Route a single update to exactly one branch.

    Branches are checked in priority order (message, edited message,
    callback query, inline query, chosen inline result); everything else
    is logged and dropped.

    Raises:
        pydantic.ValidationError: If *update* is a dict that is not a valid update.
    """
    if not isinstance(update, Update):
        update = Update.model_validate(update)

    update_type = update.type
    logger.debug("Processing update", extra={"update_id": update.update_id, "update_type": update_type.value})

    if update_type is UpdateType.MESSAGE:
        await handle_message(client, update.message)
    elif update_type is UpdateType.EDITED_MESSAGE:
        await handle_message(client, update.edited_message)
    elif update_type is UpdateType.CALLBACK_QUERY:
        await handle_callback_query(client, update.callback_query)
    elif update_type is UpdateType.INLINE_QUERY:
        await handle_inline_query(client, update.inline_query)
    elif update_type is UpdateType.CHOSEN_INLINE_RESULT:
        await handle_chosen_inline_result(client, update.chosen_inline_result)
    else:
        await handle_unknown_update(update)


def _update_id(update: Any) -> int | None:
    """Return the integer ``update_id`` of a raw update, or ``None`` if it has none."""
    if not isinstance(update, dict):
        return None
    update_id = update.get("update_id")
    if isinstance(update_id, bool) or not isinstance(update_id, int):
        return None
    return update_id


async def process_batch(client: BotClient, updates: list[dict[str, Any]]) -> bool:
    """Process *updates* concurrently and log every failure.

    Returns ``True`` when at least one failure calls for a cooldown.
    """
    results = await asyncio.gather(
        *(process_update(client, update) for update in updates),
        return_exceptions=True,
    )
    needs_cooldown = False
    for update, result in zip(updates, results):
        if isinstance(result, Exception):
            logger.debug("Update failed", extra={"update_id": _update_id(update)})
            needs_cooldown = log_error(result).should_cooldown or needs_cooldown
    return needs_cooldown


async def run(client: BotClient) -> None:
    """Start the async long-polling loop.

    Each batch is processed concurrently; the offset advances past every
    update received, whether or not its handling succeeded.  Poll failures
    and transport failures inside a batch pause polling for the cooldown
    interval before the next attempt.

    Raises:
        EnvironmentError: If ``BOT_TOKEN`` is not set.
    """
    if not BOT_TOKEN:
        raise EnvironmentError("BOT_TOKEN environment variable is not set or is empty.")

    offset: int | None = None

    logger.info("Bot is running. Polling for updates (async)...")
    while True:
        try:
            updates = await client.get_updates(offset, timeout=POLLING_TIMEOUT)
        except Exception as exc:
            await handle_polling_error(exc)
            continue

        if not updates:
            continue
        logger.debug("Received updates", extra={"count": len(updates)})
        update_ids = [uid for uid in map(_update_id, updates) if uid is not None]
        if update_ids:
            offset = max(update_ids) + 1

        if await process_batch(client, updates):
            await cooldown()
