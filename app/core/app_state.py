from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from app.adapters.messenger import MessengerAdapter
from app.adapters.telegram import TelegramAdapter
from app.adapters.translator import BaseTranslator, GoogleTranslator
from app.config import Settings, get_settings
from app.core.registry import PageRegistry
from app.services.observer_hub import ObserverHub
from app.services.translation_cache import TranslationCache
from app.services.translation_service import TranslationService
from app.utils.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class AppState:
    """
    Process-lifetime collaborators shared by every request: page registry,
    translation cache and client, channel adapters and the observer hub.
    """

    def __init__(
        self,
        pages: PageRegistry,
        messenger: MessengerAdapter,
        telegram: Optional[TelegramAdapter],
        translator: BaseTranslator,
        cache: Optional[TranslationCache] = None,
        hub: Optional[ObserverHub] = None,
        operator_language: str = "vi",
        customer_language: str = "en",
        translation_timeout: float = 15.0,
        thread_window: timedelta = timedelta(hours=48),
        clock: Optional[Clock] = None,
    ) -> None:
        self.pages = pages
        self.messenger = messenger
        self.telegram = telegram
        self.translator = translator
        self.cache = cache or TranslationCache()
        self.hub = hub or ObserverHub()
        self.thread_window = thread_window
        self.clock = clock or utc_now
        self.translation = TranslationService(
            translator,
            self.cache,
            operator_language=operator_language,
            customer_language=customer_language,
            timeout_seconds=translation_timeout,
        )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AppState":
        settings = settings or get_settings()
        pages = PageRegistry(settings.pages)
        telegram = None
        if settings.telegram_enabled and settings.telegram_bot_token:
            telegram = TelegramAdapter(
                bot_token=settings.telegram_bot_token,
                group_id=settings.telegram_group_id,
                webhook_secret=settings.telegram_webhook_secret,
            )
        elif settings.telegram_enabled:
            logger.warning("TELEGRAM_ENABLED is set but TELEGRAM_BOT_TOKEN is missing")
        return cls(
            pages=pages,
            messenger=MessengerAdapter(
                pages.as_mapping(),
                graph_api_url=settings.fb_graph_api_url,
                api_version=settings.fb_graph_api_version,
                timeout=settings.fb_request_timeout_seconds,
            ),
            telegram=telegram,
            translator=GoogleTranslator(
                settings.translate_api_url, timeout=settings.translation_timeout_seconds
            ),
            cache=TranslationCache(
                max_entries=settings.translation_cache_max_entries,
                ttl=timedelta(seconds=settings.translation_cache_ttl_seconds),
            ),
            operator_language=settings.operator_language,
            customer_language=settings.customer_language,
            translation_timeout=settings.translation_timeout_seconds,
            thread_window=timedelta(hours=settings.thread_window_hours),
        )

    async def aclose(self) -> None:
        await self.messenger.aclose()
        if isinstance(self.translator, GoogleTranslator):
            await self.translator.aclose()
