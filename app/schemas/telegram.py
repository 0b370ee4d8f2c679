"""
Telegram webhook payload schemas.

Matches the structure Telegram sends to webhook endpoints for the operator
group: plain messages, replies to relay messages, and inline-button presses.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class TelegramUser(BaseModel):
    """Telegram user (message.from)."""

    id: int
    is_bot: bool
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    language_code: Optional[str] = None


class TelegramChat(BaseModel):
    """Telegram chat (message.chat)."""

    id: int
    type: str
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class TelegramMessageEntity(BaseModel):
    """Telegram message entity (e.g. bot_command, mention)."""

    offset: int
    length: int
    type: str


class TelegramMessage(BaseModel):
    """Telegram message (update.message)."""

    message_id: int
    from_: Optional[TelegramUser] = Field(default=None, alias="from")
    chat: TelegramChat
    date: int
    text: Optional[str] = None
    caption: Optional[str] = None
    entities: Optional[list[TelegramMessageEntity]] = None
    reply_to_message: Optional[TelegramMessage] = None

    model_config = {"populate_by_name": True}


class TelegramCallbackQuery(BaseModel):
    """Inline keyboard press (update.callback_query)."""

    id: str
    from_: TelegramUser = Field(alias="from")
    chat_instance: str
    message: Optional[TelegramMessage] = None
    data: Optional[str] = None

    model_config = {"populate_by_name": True}


class TelegramWebhookUpdate(BaseModel):
    """Telegram webhook update payload (root object)."""

    update_id: int
    message: Optional[TelegramMessage] = None
    callback_query: Optional[TelegramCallbackQuery] = None


TelegramMessage.model_rebuild()
