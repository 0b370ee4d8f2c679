"""
Command to handle Telegram webhook updates from the operator group.

Receives raw webhook data, validates secret, parses the update and hands it to
the relay: replies to relayed messages are staged for confirmation, button
presses go to the action router, and /label text commands are applied.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from app.commands.base_telegram import BaseTelegramCommand
from app.config import get_settings
from app.core.action_router import ActionRouter
from app.core.app_state import AppState
from app.core.relay import RelayOrchestrator
from app.schemas.operator import OperatorCallback, OperatorCommand, OperatorReply
from app.schemas.telegram import TelegramWebhookUpdate


class TelegramWebhookCommand(BaseTelegramCommand):
    """
    Command to handle Telegram webhook updates.
    Validates X-Telegram-Bot-Api-Secret-Token, parses update, dispatches the
    operator event. Processing failures are logged; the webhook still returns
    200 so Telegram does not redeliver.
    """

    def __init__(self, db: Session, state: AppState) -> None:
        super().__init__(state)
        self.db = db
        self.settings = get_settings()
        self.logger = logging.getLogger(__name__)

    async def execute(
        self, request: Request, body: TelegramWebhookUpdate
    ) -> dict[str, str]:
        """
        Execute the Telegram webhook: validate secret, parse body, dispatch.

        Args:
            request: The incoming webhook request (headers for secret validation).
            body: Validated Telegram webhook update payload.

        Returns:
            dict: {"status": "ok"} on success.

        Raises:
            HTTPException: 503 if Telegram not configured, 403 on invalid secret,
                400 on invalid Telegram update.
        """
        adapter = self.require_telegram_adapter()
        headers = dict(request.headers) if request.headers else {}
        if not adapter.verify_webhook(self.settings.telegram_webhook_secret, headers):
            raise HTTPException(status_code=403, detail="Invalid webhook secret")
        try:
            event = adapter.parse_webhook(
                body.model_dump(by_alias=True, exclude_none=True)
            )
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning("Telegram webhook parse error: %s", e)
            raise HTTPException(
                status_code=400, detail="Invalid Telegram update"
            ) from e

        if event is None:
            return {"status": "ignored"}

        try:
            if isinstance(event, OperatorCallback):
                await ActionRouter(self.db, self.state).dispatch(event)
            elif isinstance(event, OperatorReply):
                await RelayOrchestrator(self.db, self.state).handle_operator_reply(
                    event.reply_to_message_id, event.text, event.message_id
                )
            elif isinstance(event, OperatorCommand):
                handled = await ActionRouter(self.db, self.state).handle_command(event)
                if not handled:
                    return {"status": "ignored"}
        except Exception as e:
            self.logger.exception("Failed to process Telegram update %s: %s", body.update_id, e)
        return {"status": "ok"}
