"""BotClient — service layer wrapping the Telegram Bot API endpoints the bot uses.

HTTP calls use the ``requests`` library; every blocking call is offloaded
via :func:`asyncio.to_thread` so the event loop is never blocked and the
awaiting task stays cancellable.

Failures are never swallowed here:

* non-2xx responses and ``"ok": false`` bodies raise :class:`APIException`;
* transport-level failures propagate as :class:`requests.RequestException`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, BinaryIO, Dict, List, Optional, Union

import requests
from pydantic import BaseModel

from sdk.exceptions import APIException
from sdk.models import (
    ChatAction,
    InlineQueryResultArticle,
    Message,
    ReplyMarkup,
    User,
)

_sdk_logger = logging.getLogger("shiftbot.sdk")


def _dump(model: BaseModel) -> Dict[str, Any]:
    """Serialise an outbound model the way the Bot API expects it."""
    return model.model_dump(exclude_none=True)


class BotClient:
    """Client-side service layer for the Telegram Bot API.

    Each public coroutine corresponds to a Bot API endpoint.  Send methods
    return the sent :class:`~sdk.models.Message` validated with Pydantic.
    """

    _DEFAULT_TIMEOUT: int = 10

    def __init__(self, base_url: str, timeout: int = _DEFAULT_TIMEOUT) -> None:
        """Create a new client bound to *base_url*.

        Args:
            base_url: Full Bot API base URL (e.g. ``https://api.telegram.org/bot<token>``).
            timeout: Default request timeout in seconds.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    # ------------------------------------------------------------------
    #  Internal helpers
    # ------------------------------------------------------------------

    def _post(
        self,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Send a POST request and return the ``result`` field of the body.

        With *files* the request is sent as ``multipart/form-data`` and
        *payload* becomes form fields; otherwise *payload* is sent as JSON.

        Raises:
            APIException: If the response status code is not 2xx or the
                body reports ``"ok": false``.
            requests.RequestException: On transport-level failures.
        """
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        _sdk_logger.debug("Bot API call", extra={"api_endpoint": endpoint})
        if files is not None:
            response = requests.post(url, data=payload, files=files, timeout=timeout or self._timeout)
        else:
            response = requests.post(url, json=payload, timeout=timeout or self._timeout)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not response.ok or body.get("ok") is False:
            raise APIException(response.status_code, body)
        return body.get("result")

    async def _call(
        self,
        endpoint: str,
        payload: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Run :meth:`_post` in a worker thread."""
        return await asyncio.to_thread(self._post, endpoint, payload, files, timeout)

    # ------------------------------------------------------------------
    #  Bot / update endpoints
    # ------------------------------------------------------------------

    async def get_me(self) -> User:
        """Return basic information about the bot."""
        return User.model_validate(await self._call("getMe"))

    async def get_updates(
        self,
        offset: Optional[int] = None,
        timeout: int = 30,
        allowed_updates: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Long-poll for incoming updates and return them as raw dicts.

        The HTTP timeout is kept a few seconds above the long-poll *timeout*
        so the server always answers first.
        """
        payload: Dict[str, Any] = {"timeout": timeout}
        if offset is not None:
            payload["offset"] = offset
        if allowed_updates is not None:
            payload["allowed_updates"] = allowed_updates
        return await self._call("getUpdates", payload, timeout=timeout + 5) or []

    async def set_webhook(self, url: str, drop_pending_updates: Optional[bool] = None) -> bool:
        """Register *url* as the webhook that receives updates."""
        payload: Dict[str, Any] = {"url": url}
        if drop_pending_updates is not None:
            payload["drop_pending_updates"] = drop_pending_updates
        return bool(await self._call("setWebhook", payload))

    async def delete_webhook(self, drop_pending_updates: Optional[bool] = None) -> bool:
        """Remove the webhook integration."""
        payload: Dict[str, Any] = {}
        if drop_pending_updates is not None:
            payload["drop_pending_updates"] = drop_pending_updates
        return bool(await self._call("deleteWebhook", payload))

    # ------------------------------------------------------------------
    #  Outbound messages
    # ------------------------------------------------------------------

    async def send_message(
        self,
        chat_id: Union[int, str],
        text: str,
        reply_markup: Optional[ReplyMarkup] = None,
        parse_mode: Optional[str] = None,
    ) -> Message:
        """Send a text message.  On success, the sent message is returned."""
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        if reply_markup is not None:
            payload["reply_markup"] = _dump(reply_markup)
        return Message.model_validate(await self._call("sendMessage", payload))

    async def send_photo(
        self,
        chat_id: Union[int, str],
        photo: BinaryIO,
        filename: str,
        caption: Optional[str] = None,
        reply_markup: Optional[ReplyMarkup] = None,
    ) -> Message:
        """Upload *photo* (an open binary file) and send it to *chat_id*."""
        payload: Dict[str, Any] = {"chat_id": chat_id}
        if caption is not None:
            payload["caption"] = caption
        if reply_markup is not None:
            payload["reply_markup"] = json.dumps(_dump(reply_markup))
        files = {"photo": (filename, photo)}
        return Message.model_validate(await self._call("sendPhoto", payload, files=files))

    async def send_chat_action(self, chat_id: Union[int, str], action: ChatAction) -> bool:
        """Tell the user that something is happening on the bot's side."""
        payload: Dict[str, Any] = {"chat_id": chat_id, "action": ChatAction(action).value}
        return bool(await self._call("sendChatAction", payload))

    # ------------------------------------------------------------------
    #  Query answers
    # ------------------------------------------------------------------

    async def answer_callback_query(self, callback_query_id: str, text: Optional[str] = None) -> bool:
        """Acknowledge a callback query so the spinner disappears for the user."""
        payload: Dict[str, Any] = {"callback_query_id": callback_query_id}
        if text is not None:
            payload["text"] = text
        return bool(await self._call("answerCallbackQuery", payload))

    async def answer_inline_query(
        self,
        inline_query_id: str,
        results: List[InlineQueryResultArticle],
        cache_time: Optional[int] = None,
        is_personal: Optional[bool] = None,
    ) -> bool:
        """Send answers to an inline query.  No more than **50** results are allowed."""
        payload: Dict[str, Any] = {
            "inline_query_id": inline_query_id,
            "results": [_dump(result) for result in results],
        }
        if cache_time is not None:
            payload["cache_time"] = cache_time
        if is_personal is not None:
            payload["is_personal"] = is_personal
        return bool(await self._call("answerInlineQuery", payload))


# ─────────────────────────────────────────────────────────────────────────────
# Default client
#
# A lazily-initialised module-level :class:`BotClient` instance carries the
# ``BASE_URL`` value from :mod:`config`.
# ─────────────────────────────────────────────────────────────────────────────

_default_client: BotClient | None = None


def get_default_client() -> BotClient:
    """Return (and lazily create) the module-level client singleton."""
    global _default_client
    if _default_client is None:
        from config import BASE_URL  # deferred to avoid circular imports
        _default_client = BotClient(BASE_URL)
    return _default_client
