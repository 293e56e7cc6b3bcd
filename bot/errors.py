"""Error classification for the transport adapters.

Handlers and the dispatcher let every failure propagate.  The polling loop
and the webhook endpoint hand what reaches them to :func:`classify_error`,
which picks the log text and decides whether polling should pause before
the next attempt.
"""

import asyncio
import traceback
from typing import NamedTuple

import requests

from config import POLLING_COOLDOWN
from core.logger import BotLogger
from sdk.exceptions import APIException

logger = BotLogger.get_logger()


class ErrorClassification(NamedTuple):
    """Outcome of :func:`classify_error`."""
    log_message: str
    should_cooldown: bool


def classify_error(exc: BaseException) -> ErrorClassification:
    """Map *exc* to its log text and cooldown decision.  Never raises.

    * :class:`APIException` → ``"Platform API Error:\\n[{code}]\\n{description}"``,
      no cooldown.
    * :class:`requests.RequestException` (network level) → full traceback,
      cooldown.
    * anything else → full traceback, no cooldown.
    """
    if isinstance(exc, APIException):
        return ErrorClassification(
            f"Platform API Error:\n[{exc.error_code}]\n{exc.description}",
            False,
        )
    detail = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip()
    return ErrorClassification(detail, isinstance(exc, requests.RequestException))


def log_error(exc: BaseException) -> ErrorClassification:
    """Classify *exc* and log the result."""
    classification = classify_error(exc)
    logger.error("HandleError", extra={"error_message": classification.log_message, "error_type": type(exc).__name__})
    return classification


async def cooldown(delay: float | None = None) -> None:
    """Pause for *delay* seconds (``POLLING_COOLDOWN`` by default).  Cancellable."""
    delay = POLLING_COOLDOWN if delay is None else delay
    logger.warning("Transport failure, cooling down", extra={"cooldown_seconds": delay})
    await asyncio.sleep(delay)


async def handle_polling_error(exc: BaseException) -> ErrorClassification:
    """Log *exc* and, for transport failures, wait out the cooldown before returning."""
    classification = log_error(exc)
    if classification.should_cooldown:
        await cooldown()
    return classification
