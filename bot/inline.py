"""Inline-mode handlers: inline queries and chosen inline results."""

from core.logger import BotLogger
from sdk.client import BotClient
from sdk.models import (
    ChosenInlineResult,
    InlineQuery,
    InlineQueryResultArticle,
    InputTextMessageContent,
)
from bot import content

logger = BotLogger.get_logger()


def build_inline_results() -> list[InlineQueryResultArticle]:
    """Return the fixed result list offered for every inline query."""
    return [
        InlineQueryResultArticle(
            id="1",
            title=content.INLINE_RESULT_TITLE,
            input_message_content=InputTextMessageContent(message_text=content.INLINE_RESULT_TEXT),
        ),
    ]


async def handle_inline_query(client: BotClient, inline_query: InlineQuery) -> None:
    """Answer *inline_query* with the fixed result list.

    The query text is logged but not used: results are neither filtered nor
    ranked.  Answers are never cached and are personal to the querying user.
    """
    logger.info(
        "Received inline query",
        extra={"inline_query_id": inline_query.id, "inline_query_from_id": inline_query.from_field.id, "query": inline_query.query},
    )
    await client.answer_inline_query(
        inline_query.id,
        build_inline_results(),
        cache_time=0,
        is_personal=True,
    )


async def handle_chosen_inline_result(client: BotClient, chosen: ChosenInlineResult) -> None:
    """Confirm the chosen result to the user who picked it."""
    logger.info("Received inline result", extra={"chosen_result_id": chosen.result_id})
    await client.send_message(chosen.from_field.id, f"You chose result with Id: {chosen.result_id}")
