"""
Command to handle Facebook page webhooks.

Answers the subscription handshake and relays each inbound customer message
to the operator group.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from app.config import get_settings
from app.core.app_state import AppState
from app.core.relay import RelayOrchestrator
from app.schemas.messenger import MessengerWebhook


class MessengerWebhookCommand:
    """Verify the page subscription and relay inbound page events."""

    def __init__(self, db: Session, state: AppState) -> None:
        self.db = db
        self.state = state
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)

    def verify(
        self, mode: Optional[str], token: Optional[str], challenge: Optional[str]
    ) -> str:
        """
        Return the challenge for a valid subscription handshake.

        Raises:
            HTTPException: 403 when the mode or verify token does not match.
        """
        echoed = self.state.messenger.verify_subscription(
            mode, token, challenge, self.settings.fb_verify_token
        )
        if echoed is None:
            self.logger.warning("Facebook webhook verification rejected (mode=%s)", mode)
            raise HTTPException(status_code=403, detail="Verification failed")
        self.logger.info("Facebook webhook verified")
        return echoed

    async def execute(self, body: MessengerWebhook) -> dict[str, int | str]:
        """
        Relay every customer message in the webhook.

        Returns:
            dict: {"status": "ok", "relayed": <count>}.

        Raises:
            HTTPException: 503 if the operator group is not configured,
                400 if the payload is not a page webhook.
        """
        if self.state.telegram is None:
            raise HTTPException(
                status_code=503,
                detail="Telegram integration is not configured or disabled",
            )
        try:
            messages = self.state.messenger.parse_webhook(body.model_dump())
        except ValueError as e:
            self.logger.warning("Facebook webhook parse error: %s", e)
            raise HTTPException(status_code=400, detail="Invalid page webhook") from e

        relay = RelayOrchestrator(self.db, self.state)
        relayed = 0
        for message in messages:
            page = self.state.pages.get_page(message.page_id)
            if page is None:
                self.logger.warning("No configuration for page %s", message.page_id)
                continue
            try:
                if await relay.handle_inbound(page, message):
                    relayed += 1
            except Exception as e:
                self.logger.exception(
                    "Failed to relay message %s from page %s: %s",
                    message.message_id,
                    page.id,
                    e,
                )
        return {"status": "ok", "relayed": relayed}
