"""
Translation for both relay directions.

Customer text is translated into the operator language; operator replies are
translated into the customer language. Results go through the shared
TranslationCache. A failing or slow translator never blocks the relay: the
original text is used instead.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional

from app.adapters.translator import BaseTranslator
from app.exceptions import TranslationError
from app.schemas.relay import InboundTranslation, TranslationOutput
from app.services.translation_cache import TranslationCache

logger = logging.getLogger(__name__)

UNKNOWN_LANGUAGE = "unknown"

_VIETNAMESE_MARKERS = re.compile(
    "[ăâđêôơưĂÂĐÊÔƠƯ"
    "ạảấầẩẫậắằẳẵặẹẻẽếềểễệỉịọỏốồổỗộớờởỡợụủứừửữựỳỵỷỹ"
    "ẠẢẤẦẨẪẬẮẰẲẴẶẸẺẼẾỀỂỄỆỈỊỌỎỐỒỔỖỘỚỜỞỠỢỤỦỨỪỬỮỰỲỴỶỸ]"
)
_SCRIPT_LANGUAGES = (
    (re.compile("[぀-ゟ゠-ヿ]"), "ja"),
    (re.compile("[가-힯]"), "ko"),
    (re.compile("[一-龥]"), "zh"),
)


def has_vietnamese_markers(text: str) -> bool:
    return bool(_VIETNAMESE_MARKERS.search(text or ""))


def guess_language(text: str, default: str = "en") -> str:
    """Cheap script-based guess used when the service does not report a language."""
    if has_vietnamese_markers(text):
        return "vi"
    for pattern, language in _SCRIPT_LANGUAGES:
        if pattern.search(text or ""):
            return language
    return default


def _same_text(a: str, b: str) -> bool:
    return (a or "").strip().casefold() == (b or "").strip().casefold()


class TranslationService:
    def __init__(
        self,
        translator: BaseTranslator,
        cache: TranslationCache,
        operator_language: str = "vi",
        customer_language: str = "en",
        timeout_seconds: float = 15.0,
    ) -> None:
        self._translator = translator
        self._cache = cache
        self.operator_language = operator_language
        self.customer_language = customer_language
        self._timeout = timeout_seconds

    async def _call_translator(self, text: str, target: str) -> TranslationOutput:
        try:
            return await asyncio.wait_for(
                self._translator.translate(text, target), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            raise TranslationError(
                f"translation timed out after {self._timeout}s"
            ) from e

    async def translate(self, text: str, target_language: str) -> str:
        """Cached translation; falls back to the original text on failure."""
        if not text or not text.strip():
            return text
        cached = self._cache.lookup(text, target_language)
        if cached is not None:
            return cached
        try:
            output = await self._call_translator(text, target_language)
        except TranslationError as e:
            logger.warning("Translation to %s failed, using original: %s", target_language, e)
            return text
        self._cache.store(text, target_language, output.translated_text)
        return output.translated_text

    async def to_operator(self, text: str) -> InboundTranslation:
        """Translate customer text for operators and report its source language."""
        if not text or not text.strip():
            return InboundTranslation(text=text or "", source_language=UNKNOWN_LANGUAGE)
        if has_vietnamese_markers(text):
            return InboundTranslation(text=text, source_language=self.operator_language)

        target = self.operator_language
        entry = self._cache.get_entry(text, target)
        if entry is not None:
            detected = entry.source_language or guess_language(text)
            if _same_text(entry.translation, text):
                return InboundTranslation(text=text, source_language=detected)
            return InboundTranslation(
                text=entry.translation, source_language=detected, translated=True
            )

        try:
            output = await self._call_translator(text, target)
        except TranslationError as e:
            logger.warning("Inbound translation failed, relaying original: %s", e)
            return InboundTranslation(text=text, source_language=UNKNOWN_LANGUAGE)

        detected = output.detected_language or guess_language(text)
        self._cache.store(text, target, output.translated_text, source_language=detected)
        if _same_text(output.translated_text, text):
            return InboundTranslation(text=text, source_language=detected)
        return InboundTranslation(
            text=output.translated_text, source_language=detected, translated=True
        )

    async def to_customer(self, text: str, target_language: Optional[str] = None) -> str:
        """Translate an operator reply into the customer-facing language."""
        return await self.translate(text, target_language or self.customer_language)
