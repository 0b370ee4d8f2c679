"""
Command to send an outbound message directly to a chat platform.

Resolves adapter by channel, sends via platform API, records customer-facing
sends in the message ledger. No translation or confirmation step.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.adapters.base import BasePlatformAdapter
from app.core.app_state import AppState
from app.exceptions import StorageError
from app.models.message_ledger import SENDER_OPERATOR
from app.schemas.relay import Channel, OutboundMessage, OutboundSendResult
from app.services.customer_service import CustomerService
from app.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)


def _adapter_registry(state: AppState) -> dict[Channel, BasePlatformAdapter]:
    """Only enabled adapters are included."""
    registry: dict[Channel, BasePlatformAdapter] = {Channel.MESSENGER: state.messenger}
    if state.telegram is not None:
        registry[Channel.TELEGRAM] = state.telegram
    return registry


class SendOutboundCommand:
    """
    Command to send an outbound message to the specified channel.
    Resolves adapter by channel, sends, records on success.
    """

    def __init__(self, db: Session, state: AppState) -> None:
        self.db = db
        self._adapters = _adapter_registry(state)
        self.customer_service = CustomerService(db)
        self.ledger_service = LedgerService(db)

    async def execute(self, body: OutboundMessage) -> dict[str, Any]:
        """
        Send the outbound message via the channel adapter and record it.

        Args:
            body: Normalized outbound message (channel, page, recipient, text).

        Returns:
            dict: {"data": {"success": True, "platform_message_id": ...}} on success.

        Raises:
            HTTPException: 400 if channel is not enabled or the page is missing,
                502 if the platform API failed to send.
        """
        adapter = self._adapters.get(body.channel)
        if adapter is None:
            raise HTTPException(
                status_code=400,
                detail=f"Channel {body.channel.value} is not enabled or not supported",
            )
        if body.channel == Channel.MESSENGER and not body.page_id:
            raise HTTPException(
                status_code=400, detail="page_id is required for Messenger messages"
            )
        result: OutboundSendResult = await adapter.send(body)
        if not result.success:
            raise HTTPException(
                status_code=502,
                detail="Platform API failed to send message",
            )
        if body.channel == Channel.MESSENGER:
            self._record(body)
        return {
            "data": {
                "success": True,
                "platform_message_id": result.platform_message_id,
            }
        }

    def _record(self, body: OutboundMessage) -> None:
        try:
            customer = self.customer_service.get_by_external_id(
                body.external_user_id, body.page_id
            )
            if customer is None:
                return
            self.ledger_service.append(customer.id, SENDER_OPERATOR, text=body.text)
        except StorageError as e:
            logger.warning("Outbound message sent but not recorded: %s", e)
