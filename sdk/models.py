"""Pydantic data models for the subset of the Telegram Bot API the bot uses.

Every class corresponds to an object of the Bot API.  Inbound models
(:class:`Update`, :class:`Message`, queries) are validated from the JSON the
platform sends; outbound models (keyboards, inline results) are serialised by
:class:`~sdk.client.BotClient` with ``model_dump(exclude_none=True)``.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field


class UpdateType(str, Enum):
    """Discriminator for the payload variant carried by an :class:`Update`."""

    MESSAGE = "message"
    EDITED_MESSAGE = "edited_message"
    CALLBACK_QUERY = "callback_query"
    INLINE_QUERY = "inline_query"
    CHOSEN_INLINE_RESULT = "chosen_inline_result"
    CHANNEL_POST = "channel_post"
    EDITED_CHANNEL_POST = "edited_channel_post"
    SHIPPING_QUERY = "shipping_query"
    PRE_CHECKOUT_QUERY = "pre_checkout_query"
    POLL = "poll"
    POLL_ANSWER = "poll_answer"
    UNKNOWN = "unknown"


# Order in which payload fields are inspected; the first populated one wins.
UPDATE_TYPE_PRIORITY: tuple[UpdateType, ...] = (
    UpdateType.MESSAGE,
    UpdateType.EDITED_MESSAGE,
    UpdateType.CALLBACK_QUERY,
    UpdateType.INLINE_QUERY,
    UpdateType.CHOSEN_INLINE_RESULT,
    UpdateType.CHANNEL_POST,
    UpdateType.EDITED_CHANNEL_POST,
    UpdateType.SHIPPING_QUERY,
    UpdateType.PRE_CHECKOUT_QUERY,
    UpdateType.POLL,
    UpdateType.POLL_ANSWER,
)


# Content fields checked, in order, to derive :attr:`Message.type`.
MESSAGE_CONTENT_FIELDS: tuple[str, ...] = (
    "text", "photo", "document", "animation", "audio", "sticker",
    "video", "video_note", "voice", "venue", "location", "contact",
    "poll", "dice",
)


class ChatAction(str, Enum):
    """Presence indicators accepted by ``sendChatAction``."""

    TYPING = "typing"
    UPLOAD_PHOTO = "upload_photo"


class ResponseParameters(BaseModel):
    """Contains information about why a request was unsuccessful."""

    migrate_to_chat_id: Optional[int] = None
    retry_after: Optional[int] = None

    model_config = {"populate_by_name": True}


class Error(BaseModel):
    """Error body returned by the Telegram Bot API."""

    ok: bool = False
    error_code: int
    description: str
    parameters: Optional[ResponseParameters] = None

    model_config = {"populate_by_name": True}


class Update(BaseModel):
    """An incoming update.  At most **one** of the optional payloads is present.

    The platform does not repeat the discriminator on the wire, so
    :attr:`type` derives it from whichever payload field is populated.
    Fields the bot has no model for (shipping, polls, …) are kept as raw
    dicts: they are only ever logged by type.
    """

    update_id: int
    message: Optional[Message] = None
    edited_message: Optional[Message] = None
    channel_post: Optional[Message] = None
    edited_channel_post: Optional[Message] = None
    inline_query: Optional[InlineQuery] = None
    chosen_inline_result: Optional[ChosenInlineResult] = None
    callback_query: Optional[CallbackQuery] = None
    shipping_query: Optional[dict] = None
    pre_checkout_query: Optional[dict] = None
    poll: Optional[dict] = None
    poll_answer: Optional[dict] = None

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def type(self) -> UpdateType:
        """Return the variant tag, honouring :data:`UPDATE_TYPE_PRIORITY`."""
        for update_type in UPDATE_TYPE_PRIORITY:
            if getattr(self, update_type.value) is not None:
                return update_type
        return UpdateType.UNKNOWN


class WebhookInfo(BaseModel):
    """Contains information about the current status of a webhook."""

    url: str
    has_custom_certificate: bool
    pending_update_count: int
    last_error_date: Optional[int] = None
    last_error_message: Optional[str] = None
    max_connections: Optional[int] = None
    allowed_updates: Optional[List[str]] = None

    model_config = {"populate_by_name": True}


class User(BaseModel):
    """This object represents a Telegram user or bot."""

    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None

    model_config = {"populate_by_name": True}


class Chat(BaseModel):
    """This object represents a chat."""

    id: int
    type: str
    title: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = {"populate_by_name": True}


class PhotoSize(BaseModel):
    """One size of a photo or a file / sticker thumbnail."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: Optional[int] = None

    model_config = {"populate_by_name": True}


class Document(BaseModel):
    """A general file (as opposed to photos, voice messages and audio files)."""

    file_id: str
    file_unique_id: str
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    file_size: Optional[int] = None

    model_config = {"populate_by_name": True}


class Location(BaseModel):
    """A point on the map."""

    longitude: float
    latitude: float

    model_config = {"populate_by_name": True}


class Contact(BaseModel):
    """A phone contact."""

    phone_number: str
    first_name: str
    last_name: Optional[str] = None
    user_id: Optional[int] = None

    model_config = {"populate_by_name": True}


class Message(BaseModel):
    """This object represents a message.

    Media the bot never inspects beyond their presence (stickers, audio,
    video, voice, …) are kept as raw dicts.
    """

    message_id: int
    date: int
    chat: Chat
    from_field: Optional[User] = Field(None, alias="from")
    sender_chat: Optional[Chat] = None
    edit_date: Optional[int] = None
    text: Optional[str] = None
    caption: Optional[str] = None
    photo: Optional[List[PhotoSize]] = None
    document: Optional[Document] = None
    location: Optional[Location] = None
    contact: Optional[Contact] = None
    animation: Optional[dict] = None
    audio: Optional[dict] = None
    sticker: Optional[dict] = None
    video: Optional[dict] = None
    video_note: Optional[dict] = None
    voice: Optional[dict] = None
    venue: Optional[dict] = None
    poll: Optional[dict] = None
    dice: Optional[dict] = None
    reply_markup: Optional[InlineKeyboardMarkup] = None

    model_config = {"populate_by_name": True}

    @property
    def type(self) -> str:
        """Return the content tag (``"text"``, ``"photo"``, …) or ``"unknown"``."""
        for name in MESSAGE_CONTENT_FIELDS:
            if getattr(self, name) is not None:
                return name
        return "unknown"


class KeyboardButton(BaseModel):
    """One button of a reply keyboard."""

    text: str
    request_contact: Optional[bool] = None
    request_location: Optional[bool] = None

    model_config = {"populate_by_name": True}


class ReplyKeyboardMarkup(BaseModel):
    """A [custom keyboard](https://core.telegram.org/bots#keyboards) with reply options."""

    keyboard: List[List[KeyboardButton]]
    resize_keyboard: Optional[bool] = None
    one_time_keyboard: Optional[bool] = None
    selective: Optional[bool] = None

    model_config = {"populate_by_name": True}


class ReplyKeyboardRemove(BaseModel):
    """Tells clients to remove the current custom keyboard."""

    remove_keyboard: bool = True
    selective: Optional[bool] = None

    model_config = {"populate_by_name": True}


class InlineKeyboardButton(BaseModel):
    """One button of an inline keyboard.  You **must** use exactly one of the optional fields."""

    text: str
    url: Optional[str] = None
    callback_data: Optional[str] = None
    switch_inline_query: Optional[str] = None
    switch_inline_query_current_chat: Optional[str] = None

    model_config = {"populate_by_name": True}


class InlineKeyboardMarkup(BaseModel):
    """An inline keyboard that appears right next to the message it belongs to."""

    inline_keyboard: List[List[InlineKeyboardButton]]

    model_config = {"populate_by_name": True}


ReplyMarkup = Union[InlineKeyboardMarkup, ReplyKeyboardMarkup, ReplyKeyboardRemove]


class CallbackQuery(BaseModel):
    """An incoming callback query from a callback button in an inline keyboard.

    ``message`` is absent when the button was attached to a message sent via
    inline mode.
    """

    id: str
    from_field: User = Field(..., alias="from")
    chat_instance: str
    message: Optional[Message] = None
    inline_message_id: Optional[str] = None
    data: Optional[str] = None

    model_config = {"populate_by_name": True}


class InlineQuery(BaseModel):
    """An incoming inline query."""

    id: str
    from_field: User = Field(..., alias="from")
    query: str
    offset: str = ""

    model_config = {"populate_by_name": True}


class InputTextMessageContent(BaseModel):
    """Content of a text message to be sent as the result of an inline query."""

    message_text: str
    parse_mode: Optional[str] = None

    model_config = {"populate_by_name": True}


class InlineQueryResultArticle(BaseModel):
    """An inline query result linking to an article."""

    type: str = "article"
    id: str
    title: str
    input_message_content: InputTextMessageContent
    description: Optional[str] = None

    model_config = {"populate_by_name": True}


class ChosenInlineResult(BaseModel):
    """A result of an inline query that was chosen by the user."""

    result_id: str
    from_field: User = Field(..., alias="from")
    query: str
    inline_message_id: Optional[str] = None

    model_config = {"populate_by_name": True}


# Resolve forward references between models declared out of order.
Message.model_rebuild()
CallbackQuery.model_rebuild()
Update.model_rebuild()
