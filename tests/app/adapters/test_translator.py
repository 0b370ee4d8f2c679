"""Tests for GoogleTranslator."""

import httpx
import pytest

from app.adapters.translator import GoogleTranslator
from app.exceptions import TranslationError


def translator_with(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleTranslator("https://translate.test/translate_a/single", client=client)


@pytest.mark.asyncio
async def test_translate_joins_segments_and_reports_language():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["tl"] == "vi"
        assert request.url.params["q"] == "Hello. How are you?"
        return httpx.Response(
            200,
            json=[[["Xin chào. ", "Hello. "], ["Bạn khỏe không?", "How are you?"]], None, "en"],
        )

    output = await translator_with(handler).translate("Hello. How are you?", "vi")
    assert output.translated_text == "Xin chào. Bạn khỏe không?"
    assert output.detected_language == "en"


@pytest.mark.asyncio
async def test_translate_http_error():
    translator = translator_with(lambda request: httpx.Response(503))
    with pytest.raises(TranslationError):
        await translator.translate("hello", "vi")


@pytest.mark.asyncio
async def test_translate_unexpected_shape():
    translator = translator_with(lambda request: httpx.Response(200, json={"oops": 1}))
    with pytest.raises(TranslationError):
        await translator.translate("hello", "vi")


@pytest.mark.asyncio
async def test_translate_empty_result():
    translator = translator_with(lambda request: httpx.Response(200, json=[[], None, "en"]))
    with pytest.raises(TranslationError):
        await translator.translate("hello", "vi")
