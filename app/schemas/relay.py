"""
Normalized message contracts for the relay.

Customer-channel webhooks are converted into these shapes; sends to either
channel use the outbound schema. Independent of any one platform's payload.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Channel(str, Enum):
    """Supported chat channels. Messenger faces customers, Telegram faces operators."""

    MESSENGER = "messenger"
    TELEGRAM = "telegram"


class MessageMetadata(BaseModel):
    """Metadata for normalized messages (locale, timestamp)."""

    locale: Optional[str] = None
    timestamp: Optional[datetime] = None  # ISO8601


class Attachment(BaseModel):
    """Media attached to a message; only a reference is kept, never the bytes."""

    kind: str  # image | video | audio | file | ...
    url: Optional[str] = None


class InboundMessage(BaseModel):
    """Normalized inbound customer message (adapter → core)."""

    channel: Channel
    page_id: str
    external_user_id: str
    message_id: str
    text: str = ""
    attachments: list[Attachment] = Field(default_factory=list)
    metadata: MessageMetadata = Field(default_factory=MessageMetadata)


class OutboundMessage(BaseModel):
    """Normalized outbound message (core → adapter)."""

    channel: Channel
    page_id: Optional[str] = None  # Messenger: which page token to send with
    external_user_id: str  # Messenger: PSID; Telegram: chat_id
    text: str
    reply_to_message_id: Optional[str] = None
    attachments: list[Attachment] = Field(default_factory=list)
    parse_mode: Optional[str] = None


class OutboundSendResult(BaseModel):
    """Result of sending an outbound message (success + optional message_id)."""

    success: bool
    platform_message_id: Optional[str] = None


class CustomerProfile(BaseModel):
    """Display data fetched from the customer channel's profile API."""

    display_name: str
    avatar: Optional[str] = None


class TranslationOutput(BaseModel):
    """Raw result from the translation service."""

    translated_text: str
    detected_language: Optional[str] = None


class InboundTranslation(BaseModel):
    """Customer text prepared for operators."""

    text: str
    source_language: str = "unknown"
    translated: bool = False


class StagedReply(BaseModel):
    """A staged operator reply awaiting confirmation."""

    token: str
    original_text: str
    translated_text: str
