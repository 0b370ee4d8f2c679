"""
Webhook routes for inbound platform updates.

Facebook posts page events here (after a GET subscription handshake); Telegram
posts operator-group updates. Routes hand off to commands and return 200.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.commands.webhooks.messenger_command import MessengerWebhookCommand
from app.commands.webhooks.telegram_command import TelegramWebhookCommand
from app.core.app_state import AppState
from app.db import get_db
from app.routers.utils.dependencies import get_app_state
from app.schemas.messenger import MessengerWebhook
from app.schemas.telegram import TelegramWebhookUpdate

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


@router.get("/facebook", response_class=PlainTextResponse)
def verify_facebook_webhook(
    mode: Optional[str] = Query(default=None, alias="hub.mode"),
    token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> str:
    """Facebook subscription handshake: echo hub.challenge when the verify token matches."""
    return MessengerWebhookCommand(db, state).verify(mode, token, challenge)


@router.post("/facebook")
async def facebook_webhook(
    body: MessengerWebhook,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> dict[str, int | str]:
    """Receive page events and relay customer messages to the operator group."""
    return await MessengerWebhookCommand(db, state).execute(body)


@router.post("/telegram")
async def telegram_webhook(
    request: Request,
    body: TelegramWebhookUpdate,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> dict[str, str]:
    """
    Receive Telegram webhook updates from the operator group.
    Validate X-Telegram-Bot-Api-Secret-Token if TELEGRAM_WEBHOOK_SECRET is set.
    """
    return await TelegramWebhookCommand(db, state).execute(request, body)
