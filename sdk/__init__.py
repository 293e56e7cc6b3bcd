"""Telegram Bot API SDK — Pydantic models, async service client, and exceptions.

Usage::

    from sdk import BotClient, APIException
    from sdk.models import Message, Update, UpdateType
"""

from sdk.client import BotClient, get_default_client
from sdk.exceptions import APIException

__all__ = [
    "BotClient",
    "get_default_client",
    "APIException",
]
