"""Telegram bot application layer — routing, command handlers, transports.

This package may import from ``core/``, ``sdk/`` and ``config`` only.
"""

from bot.callbacks import handle_callback_query
from bot.dispatcher import extract_command, handle_message, process_update, run
from bot.errors import ErrorClassification, classify_error, handle_polling_error
from bot.handlers import (
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
from bot.inline import handle_chosen_inline_result, handle_inline_query
from bot.registry import CommandRegistry, registry

__all__ = [
    # Dispatcher
    "run",
    "process_update",
    "handle_message",
    "extract_command",
    # Registry
    "CommandRegistry",
    "registry",
    # Command handlers
    "handle_inline_keyboard",
    "handle_keyboard",
    "handle_remove",
    "handle_photo",
    "handle_request",
    "handle_inline_mode",
    "handle_throw",
    "handle_open_day",
    "handle_close_day",
    "handle_usage",
    # Callback and inline handlers
    "handle_callback_query",
    "handle_inline_query",
    "handle_chosen_inline_result",
    # Errors
    "ErrorClassification",
    "classify_error",
    "handle_polling_error",
]
