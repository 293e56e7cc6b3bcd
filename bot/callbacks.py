"""Callback-query handler for inline keyboard interactions.

Every callback query must be answered, otherwise the pressing client keeps
showing a loading spinner.  The answer and the follow-up chat message are two
independent calls: if the answer succeeds and the send fails, the failure
propagates and the acknowledgement stands.
"""

from core.logger import BotLogger
from sdk.client import BotClient
from sdk.models import CallbackQuery

logger = BotLogger.get_logger()


async def handle_callback_query(client: BotClient, callback_query: CallbackQuery) -> None:
    """Acknowledge a button press and echo its data into the originating chat.

    Buttons attached to inline-mode messages carry no ``message``; the echo
    then goes to the pressing user's private chat.
    """
    logger.info("Received inline keyboard callback", extra={"callback_query_id": callback_query.id})

    text = f"Received {callback_query.data or ''}"
    await client.answer_callback_query(callback_query.id, text)

    if callback_query.message is not None:
        chat_id = callback_query.message.chat.id
    else:
        chat_id = callback_query.from_field.id
    await client.send_message(chat_id, text)
