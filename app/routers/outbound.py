"""
Outbound API: send messages directly to customers or the operator group.

Internal consumers POST normalized outbound messages; we resolve the adapter,
send, record on success, and return {"data": {...}}.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.commands.outbound.send_outbound_command import SendOutboundCommand
from app.core.app_state import AppState
from app.db import get_db
from app.routers.utils.dependencies import get_app_state
from app.schemas.relay import OutboundMessage

router = APIRouter(prefix="/outbound", tags=["outbound"])


@router.post("", response_model=dict[str, Any])
async def send_outbound(
    body: OutboundMessage,
    db: Session = Depends(get_db),
    state: AppState = Depends(get_app_state),
) -> dict[str, Any]:
    """
    Send an outbound message to the specified channel.
    Return {"data": { success, platform_message_id? }}.
    """
    return await SendOutboundCommand(db, state).execute(body)
