"""
Base command for Telegram-related operations.

Provides a shared way to obtain the configured TelegramAdapter for use across
webhook and outbound commands.
"""

from __future__ import annotations

from fastapi import HTTPException

from app.adapters.telegram import TelegramAdapter
from app.core.app_state import AppState


class BaseTelegramCommand:
    """
    Base for Telegram-related commands.
    Provides a shared way to obtain the operator-group TelegramAdapter.
    """

    def __init__(self, state: AppState) -> None:
        self.state = state

    def get_telegram_adapter(self) -> TelegramAdapter | None:
        """Return configured TelegramAdapter or None if Telegram is disabled."""
        return self.state.telegram

    def require_telegram_adapter(self) -> TelegramAdapter:
        adapter = self.get_telegram_adapter()
        if adapter is None:
            raise HTTPException(
                status_code=503,
                detail="Telegram integration is not configured or disabled",
            )
        return adapter
