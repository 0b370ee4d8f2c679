"""Platform adapters for chat integrations."""

from app.adapters.base import BasePlatformAdapter
from app.adapters.messenger import MessengerAdapter
from app.adapters.telegram import TelegramAdapter
from app.adapters.translator import BaseTranslator, GoogleTranslator

__all__ = [
    "BasePlatformAdapter",
    "BaseTranslator",
    "GoogleTranslator",
    "MessengerAdapter",
    "TelegramAdapter",
]
