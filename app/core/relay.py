"""
Relay between customer pages and the operator group.

Inbound: a customer message is resolved to a Customer, translated for
operators and posted to the group, under the customer's active thread when
there is one. Outbound: an operator reply to a relayed message is translated
and staged for confirmation.

Every step after identity resolution is best-effort. A storage or translation
problem degrades the relayed message; it never drops it.
"""

from __future__ import annotations

import logging
from html import escape
from typing import Optional

from sqlalchemy.orm import Session

from app.config import PageConfig
from app.constants.notices import OperatorNotices
from app.core.app_state import AppState
from app.core.formatting import (
    confirmation_controls,
    format_confirmation,
    format_inbound,
    inbound_controls,
)
from app.exceptions import NotFoundError, StorageError, TransportError
from app.models.customer import Customer
from app.models.message_ledger import SENDER_CUSTOMER
from app.schemas.relay import InboundMessage, StagedReply
from app.services.customer_service import CustomerService
from app.services.label_service import LabelService
from app.services.ledger_service import LedgerService
from app.services.observer_hub import MESSAGE_RECEIVED
from app.services.pending_reply_service import PendingReplyService
from app.services.thread_service import AnchorInfo, ThreadService
from app.utils.clock import Clock

logger = logging.getLogger(__name__)


def token_safe(value: str) -> str:
    """Action-token arguments may not contain underscores."""
    return (value or "unknown").replace("_", "-")


class RelayOrchestrator:
    def __init__(self, db: Session, state: AppState, clock: Optional[Clock] = None) -> None:
        self.db = db
        self.state = state
        self._clock = clock or state.clock
        self.customers = CustomerService(db, state.messenger.fetch_profile)
        self.threads = ThreadService(db, window=state.thread_window, clock=self._clock)
        self.labels = LabelService(db)
        self.ledger = LedgerService(db, clock=self._clock)
        self.pending = PendingReplyService(
            db,
            state.translation,
            state.messenger.send_text,
            state.pages.as_mapping(),
            self.ledger,
        )

    @property
    def operator_channel(self):
        if self.state.telegram is None:
            raise TransportError("operator channel is not configured")
        return self.state.telegram

    async def _resolve_customer(self, page: PageConfig, message: InboundMessage) -> Customer:
        try:
            return await self.customers.resolve(
                page.id, message.external_user_id, page.token
            )
        except StorageError as e:
            logger.warning("Customer store unavailable, relaying without identity: %s", e)
            return CustomerService.synthetic(page.id, message.external_user_id)

    def _active_anchor(self, customer: Customer, page_id: str, now) -> Optional[AnchorInfo]:
        try:
            return self.threads.find_active_anchor(customer.id, page_id, now)
        except StorageError as e:
            logger.warning("Anchor lookup failed, opening a new thread: %s", e)
            return None

    async def handle_inbound(self, page: PageConfig, message: InboundMessage) -> Optional[str]:
        """
        Relay one customer message to the operator group.

        Returns the operator-group message id, or None when it could not be posted.
        """
        now = self._clock()
        customer = await self._resolve_customer(page, message)
        try:
            labels = self.labels.get_customer_labels(customer.id)
        except StorageError as e:
            logger.warning("Label lookup failed: %s", e)
            labels = []

        translation = await self.state.translation.to_operator(message.text)
        anchor = self._active_anchor(customer, page.id, now)
        language = token_safe(translation.source_language)

        body = format_inbound(
            page.name,
            customer,
            labels,
            translation,
            message.text,
            now,
            anchor=anchor,
            attachments=message.attachments,
        )
        controls = inbound_controls(
            page.id, message.external_user_id, language, customer.id
        )
        try:
            operator_message_id = await self.operator_channel.send_message(
                body,
                reply_to=anchor.anchor_message_id if anchor else None,
                controls=controls,
            )
        except TransportError as e:
            logger.error(
                "Could not relay message %s from page %s: %s", message.message_id, page.id, e
            )
            return None

        # Mappings and anchors are only written for messages that exist in the group
        if anchor is None and customer.id is not None:
            try:
                self.threads.record_anchor(customer.id, page.id, operator_message_id)
            except StorageError as e:
                logger.warning("Anchor not recorded for customer %s: %s", customer.id, e)
        try:
            self.threads.record_mapping(
                operator_message_id,
                page.id,
                message.external_user_id,
                customer.id,
                translation.source_language,
            )
        except StorageError as e:
            logger.error("Mapping not recorded for message %s: %s", operator_message_id, e)

        self._record_customer_message(
            customer, message, translation.text if translation.translated else None
        )
        await self.state.hub.publish(
            MESSAGE_RECEIVED,
            {
                "page_id": page.id,
                "page_name": page.name,
                "customer_id": customer.id,
                "customer_name": customer.name,
                "external_user_id": message.external_user_id,
                "text": message.text,
                "translated_text": translation.text,
                "language": translation.source_language,
                "attachments": [a.model_dump() for a in message.attachments],
                "operator_message_id": operator_message_id,
                "threaded": anchor is not None,
                "timestamp": now.isoformat(),
            },
        )
        logger.info(
            "Relayed message from %s (%s) on %s to operator message %s",
            customer.name,
            customer.short_id,
            page.name,
            operator_message_id,
        )
        return operator_message_id

    def _record_customer_message(
        self, customer: Customer, message: InboundMessage, translated: Optional[str]
    ) -> None:
        if customer.id is None:
            return
        first, *rest = message.attachments or [None]
        try:
            self.ledger.append(
                customer.id,
                SENDER_CUSTOMER,
                text=message.text,
                media_kind=first.kind if first else None,
                media_ref=first.url if first else None,
                translated_text=translated,
            )
            for attachment in rest:
                self.ledger.append(
                    customer.id,
                    SENDER_CUSTOMER,
                    media_kind=attachment.kind,
                    media_ref=attachment.url,
                )
        except StorageError as e:
            logger.warning("Ledger entry not recorded for customer %s: %s", customer.id, e)

    async def notify(self, text: str, reply_to: Optional[str]) -> None:
        """Post a short plain-text notice to the operator group."""
        try:
            await self.operator_channel.send_message(
                escape(text, quote=False), reply_to=reply_to
            )
        except TransportError as e:
            logger.error("Could not post notice to operator group: %s", e)

    async def handle_operator_reply(
        self, reply_to_message_id: str, text: str, reply_message_id: str
    ) -> Optional[StagedReply]:
        """
        Stage an operator's reply to a relayed message and ask for confirmation.

        Returns the staged reply, or None when a notice was posted instead.
        """
        try:
            mapping = self.threads.get_mapping(reply_to_message_id)
        except NotFoundError:
            await self.notify(OperatorNotices.CUSTOMER_NOT_FOUND, reply_message_id)
            return None
        except StorageError as e:
            logger.error("Mapping lookup failed: %s", e)
            await self.notify(OperatorNotices.STORAGE_FAILED, reply_message_id)
            return None

        page = self.state.pages.get_page(mapping.page_id)
        if page is None:
            await self.notify(OperatorNotices.PAGE_NOT_CONFIGURED, reply_message_id)
            return None

        try:
            staged = await self.pending.stage(
                page.id, mapping.external_user_id, text, customer_id=mapping.customer_id
            )
        except StorageError as e:
            logger.error("Could not stage reply: %s", e)
            await self.notify(OperatorNotices.STORAGE_FAILED, reply_message_id)
            return None

        try:
            await self.operator_channel.send_message(
                format_confirmation(staged),
                reply_to=reply_message_id,
                controls=confirmation_controls(staged.token),
            )
        except TransportError as e:
            logger.error("Could not post confirmation for %s: %s", staged.token, e)
        return staged
