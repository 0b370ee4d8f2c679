"""
Telegram platform adapter (operator channel).

Uses python-telegram-bot for parsing webhook updates and for talking to the
single operator group: posting relayed messages with inline controls, editing
or deleting them, and answering button presses.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from telegram import (
    Bot,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    LinkPreviewOptions,
    ReplyParameters,
    Update,
)
from telegram.constants import ParseMode
from telegram.error import TelegramError

from app.adapters.base import BasePlatformAdapter
from app.exceptions import TransportError
from app.schemas.operator import (
    OperatorCallback,
    OperatorCommand,
    OperatorEvent,
    OperatorReply,
)
from app.schemas.relay import Channel, OutboundMessage, OutboundSendResult

logger = logging.getLogger(__name__)

NO_PREVIEW = LinkPreviewOptions(is_disabled=True)

# Rows of (label, action token) pairs rendered as inline buttons.
Controls = Sequence[Sequence[tuple[str, str]]]


def build_keyboard(controls: Optional[Controls]) -> Optional[InlineKeyboardMarkup]:
    if not controls:
        return None
    return InlineKeyboardMarkup(
        [
            [InlineKeyboardButton(text=label, callback_data=token) for label, token in row]
            for row in controls
        ]
    )


def _display_name(user: Any) -> Optional[str]:
    if user is None:
        return None
    return user.full_name or user.username


class TelegramAdapter(BasePlatformAdapter):
    """Telegram adapter: parse webhook updates, send messages via Bot API."""

    TELEGRAM_SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

    def __init__(
        self,
        bot_token: str,
        group_id: Optional[str] = None,
        webhook_secret: Optional[str] = None,
    ) -> None:
        self._bot_token = bot_token
        self.group_id = group_id
        self._webhook_secret = webhook_secret
        self._bot: Optional[Bot] = None

    def _get_bot(self) -> Bot:
        if self._bot is None:
            self._bot = Bot(token=self._bot_token)
        return self._bot

    def verify_webhook(
        self, secret: Optional[str], request_headers: Optional[dict[str, str]] = None
    ) -> bool:
        """Validate X-Telegram-Bot-Api-Secret-Token if webhook secret is configured."""
        expected = secret or self._webhook_secret
        if not expected:
            return True
        request_headers = request_headers or {}
        header_lower = self.TELEGRAM_SECRET_HEADER.lower()
        actual = None
        for key, value in request_headers.items():
            if key.lower() == header_lower:
                actual = value
                break
        return actual == expected

    def _from_operator_group(self, chat_id: Optional[str]) -> bool:
        return not self.group_id or chat_id == str(self.group_id)

    def parse_webhook(self, raw_payload: dict[str, Any]) -> Optional[OperatorEvent]:
        """
        Parse a Telegram update into an operator event.

        Returns None for updates the relay does not act on: plain chatter,
        messages outside the operator group, service messages.
        """
        update = Update.de_json(raw_payload, self._get_bot())
        if update is None:
            raise ValueError("Invalid Telegram update: de_json returned None")

        query = update.callback_query
        if query is not None:
            qmsg = query.message
            return OperatorCallback(
                callback_id=str(query.id),
                chat_id=str(qmsg.chat.id) if qmsg is not None else None,
                message_id=str(qmsg.message_id) if qmsg is not None else None,
                data=query.data or "",
                sender_name=_display_name(query.from_user),
            )

        msg = update.message
        if msg is None or not msg.text:
            return None
        chat_id = str(msg.chat_id)
        if not self._from_operator_group(chat_id):
            logger.debug("Ignoring message from chat %s outside operator group", chat_id)
            return None

        text = msg.text.strip()
        if text.startswith("/"):
            head, *args = text.split()
            command = head[1:].split("@", 1)[0].lower()
            return OperatorCommand(
                chat_id=chat_id,
                message_id=str(msg.message_id),
                command=command,
                args=args,
            )

        if msg.reply_to_message is None:
            return None
        return OperatorReply(
            chat_id=chat_id,
            message_id=str(msg.message_id),
            reply_to_message_id=str(msg.reply_to_message.message_id),
            text=msg.text,
            sender_name=_display_name(msg.from_user),
        )

    def _require_group(self) -> str:
        if not self.group_id:
            raise TransportError("Telegram operator group is not configured")
        return str(self.group_id)

    async def send_message(
        self,
        text: str,
        reply_to: Optional[str] = None,
        controls: Optional[Controls] = None,
    ) -> str:
        """Post an HTML message to the operator group; returns the new message id."""
        send_kw: dict[str, Any] = {
            "chat_id": self._require_group(),
            "text": text,
            "parse_mode": ParseMode.HTML,
            "link_preview_options": NO_PREVIEW,
            "reply_markup": build_keyboard(controls),
        }
        if reply_to:
            send_kw["reply_parameters"] = ReplyParameters(
                message_id=int(reply_to), allow_sending_without_reply=True
            )
        try:
            sent = await self._get_bot().send_message(**send_kw)
        except TelegramError as e:
            raise TransportError(f"Telegram send_message failed: {e}") from e
        return str(sent.message_id)

    async def edit_message(
        self,
        message_id: str,
        text: Optional[str] = None,
        controls: Optional[Controls] = None,
    ) -> None:
        """Replace a message's text (and keyboard), or only its keyboard when text is None."""
        chat_id = self._require_group()
        try:
            if text is None:
                await self._get_bot().edit_message_reply_markup(
                    chat_id=chat_id,
                    message_id=int(message_id),
                    reply_markup=build_keyboard(controls),
                )
            else:
                await self._get_bot().edit_message_text(
                    text=text,
                    chat_id=chat_id,
                    message_id=int(message_id),
                    parse_mode=ParseMode.HTML,
                    link_preview_options=NO_PREVIEW,
                    reply_markup=build_keyboard(controls),
                )
        except TelegramError as e:
            raise TransportError(f"Telegram edit failed: {e}") from e

    async def delete_message(self, message_id: str) -> None:
        try:
            await self._get_bot().delete_message(
                chat_id=self._require_group(), message_id=int(message_id)
            )
        except TelegramError as e:
            raise TransportError(f"Telegram delete failed: {e}") from e

    async def acknowledge(self, callback_id: str, text: Optional[str] = None) -> None:
        """Answer a button press so the client stops its spinner."""
        try:
            await self._get_bot().answer_callback_query(
                callback_query_id=callback_id, text=text
            )
        except TelegramError as e:
            raise TransportError(f"Telegram answer_callback_query failed: {e}") from e

    async def send(self, outbound: OutboundMessage) -> OutboundSendResult:
        """Send message via Telegram Bot API. chat_id = external_user_id."""
        if outbound.channel != Channel.TELEGRAM:
            return OutboundSendResult(success=False, platform_message_id=None)

        send_kw: dict[str, Any] = {
            "chat_id": outbound.external_user_id,
            "text": outbound.text,
        }
        if outbound.reply_to_message_id:
            send_kw["reply_parameters"] = ReplyParameters(
                message_id=int(outbound.reply_to_message_id),
                allow_sending_without_reply=True,
            )
        if outbound.parse_mode:
            send_kw["parse_mode"] = outbound.parse_mode
        try:
            sent = await self._get_bot().send_message(**send_kw)
        except TelegramError as e:
            logger.warning("Telegram send failed: %s", e)
            return OutboundSendResult(success=False, platform_message_id=None)
        return OutboundSendResult(
            success=True,
            platform_message_id=(
                str(sent.message_id) if sent and sent.message_id else None
            ),
        )
