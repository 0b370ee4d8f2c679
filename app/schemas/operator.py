"""Normalized operator-group events parsed from Telegram updates."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field


class OperatorReply(BaseModel):
    """An operator replied (natively) to a message in the operator group."""

    chat_id: str
    message_id: str
    reply_to_message_id: str
    text: str
    sender_name: Optional[str] = None


class OperatorCallback(BaseModel):
    """An operator pressed an inline button carrying an action token."""

    callback_id: str
    chat_id: Optional[str] = None
    message_id: Optional[str] = None
    data: str = ""
    sender_name: Optional[str] = None


class OperatorCommand(BaseModel):
    """A slash command typed in the operator group, e.g. /label 12 vip."""

    chat_id: str
    message_id: str
    command: str
    args: list[str] = Field(default_factory=list)


OperatorEvent = Union[OperatorReply, OperatorCallback, OperatorCommand]
