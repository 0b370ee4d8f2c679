"""
Dispatch of inline-button presses and operator text commands.

Each button press is acknowledged exactly once, whatever the handler does.
Handlers return the acknowledgement text (or None for a silent one) and raise
typed errors; the dispatcher turns errors into short notices.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Optional

from sqlalchemy.orm import Session

from app.constants.catalog import HistoryRange
from app.constants.notices import OperatorNotices
from app.core.actions import Action, ActionKind, decode_action
from app.core.app_state import AppState
from app.core.formatting import (
    done_controls,
    format_sent,
    history_menu_controls,
    quick_reply_controls,
    render_history,
)
from app.core.relay import RelayOrchestrator
from app.exceptions import NotFoundError, StorageError, TransportError
from app.models.message_ledger import SENDER_OPERATOR
from app.schemas.operator import OperatorCallback, OperatorCommand
from app.schemas.relay import StagedReply
from app.services.observer_hub import MESSAGE_SENT
from app.services.quick_reply_service import QuickReplyService
from app.utils.clock import Clock

logger = logging.getLogger(__name__)

# Telegram shows at most 200 characters in a callback answer
MAX_ACK_CHARS = 200

Handler = Callable[[Action, OperatorCallback], Awaitable[Optional[str]]]


def _int_arg(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise NotFoundError(f"invalid {what}: {value}") from e


class ActionRouter:
    def __init__(self, db: Session, state: AppState, clock: Optional[Clock] = None) -> None:
        self.db = db
        self.state = state
        self.relay = RelayOrchestrator(db, state, clock=clock)
        self.quick_replies = QuickReplyService(db)
        self._handlers: Dict[ActionKind, Handler] = {
            ActionKind.SEND: self._send,
            ActionKind.CANCEL: self._cancel,
            ActionKind.QUICK_REPLY: self._quick_reply_menu,
            ActionKind.SEND_QUICK_REPLY: self._send_quick_reply,
            ActionKind.ADD_LABEL: self._add_label_hint,
            ActionKind.HISTORY: self._history_menu,
            ActionKind.HISTORY_FILTER: self._history,
            ActionKind.DONE: self._done,
            ActionKind.CLOSE: self._close,
            ActionKind.NOOP: self._noop,
        }

    @property
    def operator_channel(self):
        return self.relay.operator_channel

    async def dispatch(self, callback: OperatorCallback) -> Action:
        """Route one button press and acknowledge it."""
        action = decode_action(callback.data)
        try:
            ack = await self._handlers[action.kind](action, callback)
        except NotFoundError as e:
            logger.info("Action %s on missing data: %s", action.kind, e)
            ack = (
                OperatorNotices.EXPIRED
                if action.kind == ActionKind.SEND
                else OperatorNotices.NOT_FOUND
            )
        except TransportError as e:
            logger.warning("Action %s failed to reach a channel: %s", action.kind, e)
            ack = OperatorNotices.SEND_FAILED
        except StorageError as e:
            logger.error("Action %s failed on storage: %s", action.kind, e)
            ack = OperatorNotices.STORAGE_FAILED
        except Exception:
            logger.exception("Action %s failed", action.kind)
            ack = OperatorNotices.GENERIC_FAILURE
        await self._acknowledge(callback.callback_id, ack)
        return action

    async def _acknowledge(self, callback_id: str, text: Optional[str]) -> None:
        if text and len(text) > MAX_ACK_CHARS:
            text = text[: MAX_ACK_CHARS - 1] + "…"
        try:
            await self.operator_channel.acknowledge(callback_id, text)
        except TransportError as e:
            logger.warning("Callback %s not acknowledged: %s", callback_id, e)

    async def _edit_quietly(self, message_id: Optional[str], **kwargs) -> None:
        """Edits after a completed action must not turn success into failure."""
        if not message_id:
            return
        try:
            await self.operator_channel.edit_message(message_id, **kwargs)
        except TransportError as e:
            logger.warning("Could not update operator message %s: %s", message_id, e)

    async def _send(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        staged = await self.relay.pending.confirm(action.arg(0))
        await self._edit_quietly(callback.message_id, text=format_sent(staged))
        await self.state.hub.publish(
            MESSAGE_SENT,
            {
                "token": staged.token,
                "text": staged.original_text,
                "translated_text": staged.translated_text,
                "operator": callback.sender_name,
            },
        )
        return OperatorNotices.SENT

    async def _cancel(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        self.relay.pending.cancel(action.arg(0))
        await self._edit_quietly(callback.message_id, text=OperatorNotices.CANCELLED_BODY)
        return OperatorNotices.CANCELLED

    async def _quick_reply_menu(
        self, action: Action, callback: OperatorCallback
    ) -> Optional[str]:
        page_id, external_user_id, language = action.args
        quick_replies = self.quick_replies.get_quick_replies()
        if not quick_replies:
            return OperatorNotices.NO_QUICK_REPLIES
        await self.operator_channel.send_message(
            OperatorNotices.QUICK_REPLY_MENU,
            reply_to=callback.message_id,
            controls=quick_reply_controls(quick_replies, page_id, external_user_id, language),
        )
        return None

    async def _send_quick_reply(
        self, action: Action, callback: OperatorCallback
    ) -> Optional[str]:
        qr_id, page_id, external_user_id, language = action.args
        quick_reply = self.quick_replies.require_quick_reply(_int_arg(qr_id, "quick reply id"))
        page = self.state.pages.get_page(page_id)
        if page is None:
            return OperatorNotices.PAGE_NOT_CONFIGURED
        text = quick_reply.text_for(language)
        await self.state.messenger.send_text(external_user_id, page.token, text)

        try:
            customer = self.relay.customers.get_by_external_id(external_user_id, page_id)
            if customer is not None:
                self.relay.ledger.append(customer.id, SENDER_OPERATOR, text=text)
        except StorageError as e:
            logger.warning("Quick reply sent but not recorded: %s", e)
        await self._edit_quietly(
            callback.message_id,
            text=format_sent(StagedReply(token="", original_text=text, translated_text=text)),
        )
        return OperatorNotices.SENT

    async def _add_label_hint(
        self, action: Action, callback: OperatorCallback
    ) -> Optional[str]:
        customer_id = _int_arg(action.arg(0), "customer id")
        names = ", ".join(label.name for label in self.relay.labels.get_labels())
        return OperatorNotices.LABEL_HINT.format(customer_id=customer_id, labels=names or "-")

    async def _history_menu(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        customer_id = _int_arg(action.arg(0), "customer id")
        await self.operator_channel.send_message(
            OperatorNotices.HISTORY_MENU,
            reply_to=callback.message_id,
            controls=history_menu_controls(customer_id),
        )
        return None

    async def _history(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        customer_id = _int_arg(action.arg(0), "customer id")
        try:
            history_range = HistoryRange(action.arg(1))
        except ValueError as e:
            raise NotFoundError(f"unknown history range {action.arg(1)}") from e
        customer = self.relay.customers.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(f"customer {customer_id} not found")
        entries = self.relay.ledger.history_for_range(customer_id, history_range)
        body = render_history(customer, entries, history_range)
        controls = history_menu_controls(customer_id)
        if callback.message_id:
            await self.operator_channel.edit_message(
                callback.message_id, text=body, controls=controls
            )
        else:
            await self.operator_channel.send_message(body, controls=controls)
        return None

    async def _done(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        if callback.message_id:
            await self.operator_channel.edit_message(
                callback.message_id, controls=done_controls(callback.sender_name)
            )
        return OperatorNotices.DONE

    async def _close(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        if callback.message_id:
            await self.operator_channel.delete_message(callback.message_id)
        return None

    async def _noop(self, action: Action, callback: OperatorCallback) -> Optional[str]:
        return None

    async def handle_command(self, command: OperatorCommand) -> bool:
        """
        Handle /label and /unlabel. Returns False for commands this router does
        not know, so they can be ignored.
        """
        if command.command not in ("label", "unlabel"):
            return False
        if len(command.args) < 2:
            await self.relay.notify(
                OperatorNotices.LABEL_USAGE.format(command=command.command),
                command.message_id,
            )
            return True

        raw_id, label_name = command.args[0].lstrip("#"), command.args[1]
        try:
            customer = self.relay.customers.get_customer(int(raw_id)) if raw_id.isdigit() else None
            if customer is None:
                text = OperatorNotices.CUSTOMER_NOT_FOUND
            elif command.command == "label":
                label = self.relay.labels.assign_label(customer.id, label_name)
                text = OperatorNotices.LABEL_ADDED.format(label=label.name, customer_id=customer.id)
            else:
                self.relay.labels.remove_label(customer.id, label_name)
                text = OperatorNotices.LABEL_REMOVED.format(
                    label=label_name, customer_id=customer.id
                )
        except NotFoundError as e:
            logger.info("Label command rejected: %s", e)
            text = OperatorNotices.LABEL_UNKNOWN.format(label=label_name)
        except StorageError as e:
            logger.error("Label command failed: %s", e)
            text = OperatorNotices.STORAGE_FAILED
        await self.relay.notify(text, command.message_id)
        return True
