"""
Facebook Messenger page webhook payload schemas.

Only the fields the relay reads are declared; everything else is ignored.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class MessengerParticipant(BaseModel):
    id: str


class MessengerAttachmentPayload(BaseModel):
    url: Optional[str] = None


class MessengerAttachment(BaseModel):
    type: str
    payload: Optional[MessengerAttachmentPayload] = None


class MessengerMessage(BaseModel):
    mid: Optional[str] = None
    text: Optional[str] = None
    attachments: list[MessengerAttachment] = Field(default_factory=list)
    is_echo: bool = False


class MessengerEvent(BaseModel):
    """One entry of entry[].messaging[]."""

    sender: MessengerParticipant
    recipient: Optional[MessengerParticipant] = None
    timestamp: Optional[int] = None
    message: Optional[MessengerMessage] = None


class MessengerEntry(BaseModel):
    id: str
    time: Optional[int] = None
    messaging: list[MessengerEvent] = Field(default_factory=list)


class MessengerWebhook(BaseModel):
    """Page webhook root object; `object` is 'page' for page subscriptions."""

    object: str
    entry: list[MessengerEntry] = Field(default_factory=list)
