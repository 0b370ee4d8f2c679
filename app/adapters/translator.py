"""
Translation client.

Talks to Google's public `translate_a/single` endpoint (the one the browser
widget uses); no API key required. Any transport or decoding problem is
raised as TranslationError.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from app.exceptions import TranslationError
from app.schemas.relay import TranslationOutput

logger = logging.getLogger(__name__)

DEFAULT_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"


class BaseTranslator(ABC):
    """Contract for translation backends."""

    @abstractmethod
    async def translate(
        self, text: str, target_language: str, source_language: str = "auto"
    ) -> TranslationOutput:
        """Translate text; raise TranslationError on any failure."""
        ...


class GoogleTranslator(BaseTranslator):
    def __init__(
        self,
        base_url: str = DEFAULT_TRANSLATE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0,
    ) -> None:
        self._base_url = base_url
        self._client = client
        self._timeout = timeout

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def translate(
        self, text: str, target_language: str, source_language: str = "auto"
    ) -> TranslationOutput:
        params = {
            "client": "gtx",
            "sl": source_language,
            "tl": target_language,
            "dt": "t",
            "q": text,
        }
        try:
            resp = await self._get_client().get(self._base_url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TranslationError(f"translation request failed: {e}") from e
        return self._parse(data)

    @staticmethod
    def _parse(data: Any) -> TranslationOutput:
        """
        Response shape: [[[translated, original, ...], ...], null, detected_lang, ...].
        Long inputs come back split into several sentence segments.
        """
        try:
            segments = data[0] or []
            translated = "".join(seg[0] for seg in segments if seg and seg[0])
            detected = data[2] if len(data) > 2 and isinstance(data[2], str) else None
        except (IndexError, TypeError, KeyError) as e:
            raise TranslationError(f"unexpected translation response: {e}") from e
        if not translated:
            raise TranslationError("empty translation response")
        return TranslationOutput(translated_text=translated, detected_language=detected)
