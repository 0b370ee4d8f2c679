"""Tests for TranslationService."""

import asyncio

import pytest

from app.schemas.relay import TranslationOutput
from app.services.translation_cache import TranslationCache
from app.services.translation_service import (
    TranslationService,
    guess_language,
    has_vietnamese_markers,
)


@pytest.fixture
def service(translator, clock):
    return TranslationService(translator, TranslationCache(clock=clock))


def test_guess_language():
    assert guess_language("Xin chào bạn") == "vi"
    assert guess_language("こんにちは") == "ja"
    assert guess_language("안녕하세요") == "ko"
    assert guess_language("你好") == "zh"
    assert guess_language("hello") == "en"


def test_has_vietnamese_markers():
    assert has_vietnamese_markers("Cảm ơn")
    assert not has_vietnamese_markers("thank you")


@pytest.mark.asyncio
async def test_to_operator_translates_and_caches(service, translator):
    translator.add("How much is this?", "vi", "Cái này bao nhiêu?", detected="en")

    first = await service.to_operator("How much is this?")
    second = await service.to_operator("How much is this?")

    assert first.translated is True
    assert first.text == "Cái này bao nhiêu?"
    assert first.source_language == "en"
    assert second.text == "Cái này bao nhiêu?"
    assert translator.calls == [("How much is this?", "vi")]


@pytest.mark.asyncio
async def test_to_operator_skips_vietnamese_text(service, translator):
    result = await service.to_operator("Shop ơi còn hàng không?")
    assert result.translated is False
    assert result.source_language == "vi"
    assert translator.calls == []


@pytest.mark.asyncio
async def test_to_operator_falls_back_to_original_on_failure(service, translator):
    translator.fail = True
    result = await service.to_operator("Do you ship to Hanoi?")
    assert result.text == "Do you ship to Hanoi?"
    assert result.translated is False
    assert result.source_language == "unknown"


@pytest.mark.asyncio
async def test_to_operator_empty_text(service, translator):
    result = await service.to_operator("")
    assert result.text == ""
    assert translator.calls == []


@pytest.mark.asyncio
async def test_to_operator_identity_translation_is_not_marked_translated(service):
    result = await service.to_operator("OK")
    assert result.translated is False
    assert result.text == "OK"


@pytest.mark.asyncio
async def test_to_customer_uses_customer_language(service, translator):
    translator.add("Xin chào", "en", "Hello", detected="vi")
    assert await service.to_customer("Xin chào") == "Hello"
    assert translator.calls == [("Xin chào", "en")]


@pytest.mark.asyncio
async def test_translate_timeout_returns_original(translator, clock):
    class SlowTranslator(type(translator)):
        async def translate(self, text, target_language, source_language="auto"):
            await asyncio.sleep(1)
            return TranslationOutput(translated_text="late")

    service = TranslationService(
        SlowTranslator(), TranslationCache(clock=clock), timeout_seconds=0.01
    )
    assert await service.translate("hello", "vi") == "hello"


@pytest.mark.asyncio
async def test_to_operator_cached_repeat_keeps_detected_language(service, translator):
    translator.add("xin chao ban", "vi", "xin chào bạn", detected="vi")

    first = await service.to_operator("xin chao ban")
    second = await service.to_operator("xin chao ban")

    assert first.source_language == "vi"
    assert second.source_language == "vi"
    assert second.text == first.text
    assert len(translator.calls) == 1
