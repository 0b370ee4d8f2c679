"""Tests for MessengerAdapter."""

import json

import httpx
import pytest

from app.adapters.messenger import MessengerAdapter, placeholder_name
from app.config import PageConfig
from app.exceptions import TransportError
from app.schemas.relay import Attachment, Channel, OutboundMessage

PAGE = PageConfig(id="p1", name="Shop One", token="token-1")


def page_webhook(*events, page_id="p1"):
    return {"object": "page", "entry": [{"id": page_id, "time": 1, "messaging": list(events)}]}


def text_event(text, sender="24680135790", mid="m_1"):
    return {
        "sender": {"id": sender},
        "recipient": {"id": "p1"},
        "timestamp": 1760860800000,
        "message": {"mid": mid, "text": text},
    }


def adapter_with(handler):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return MessengerAdapter({PAGE.id: PAGE}, client=client)


def test_placeholder_name():
    assert placeholder_name("1234567890") == "Khách #567890"


def test_verify_subscription():
    assert MessengerAdapter.verify_subscription("subscribe", "v", "abc", "v") == "abc"
    assert MessengerAdapter.verify_subscription("subscribe", "wrong", "abc", "v") is None
    assert MessengerAdapter.verify_subscription("unsubscribe", "v", "abc", "v") is None
    assert MessengerAdapter.verify_subscription("subscribe", None, "abc", None) is None


def test_parse_text_message():
    adapter = MessengerAdapter({PAGE.id: PAGE})
    [message] = adapter.parse_webhook(page_webhook(text_event("How much?")))

    assert message.channel == Channel.MESSENGER
    assert message.page_id == "p1"
    assert message.external_user_id == "24680135790"
    assert message.message_id == "m_1"
    assert message.text == "How much?"
    assert message.metadata.timestamp.year == 2025


def test_parse_attachments():
    event = {
        "sender": {"id": "u1"},
        "message": {
            "mid": "m_2",
            "attachments": [
                {"type": "image", "payload": {"url": "https://cdn/a.jpg"}},
                {"type": "file", "payload": {"url": "https://cdn/b.pdf"}},
            ],
        },
    }
    [message] = MessengerAdapter({}).parse_webhook(page_webhook(event))
    assert message.text == ""
    assert [(a.kind, a.url) for a in message.attachments] == [
        ("image", "https://cdn/a.jpg"),
        ("file", "https://cdn/b.pdf"),
    ]


def test_parse_skips_echoes_and_non_message_events():
    echo = text_event("from page")
    echo["message"]["is_echo"] = True
    read = {"sender": {"id": "u1"}, "read": {"watermark": 1}}
    empty = {"sender": {"id": "u1"}, "message": {"mid": "m_3"}}

    assert MessengerAdapter({}).parse_webhook(page_webhook(echo, read, empty)) == []


def test_parse_rejects_non_page_object():
    with pytest.raises(ValueError):
        MessengerAdapter({}).parse_webhook({"object": "instagram", "entry": []})
    with pytest.raises(ValueError):
        MessengerAdapter({}).parse_webhook({"entry": []})


@pytest.mark.asyncio
async def test_fetch_profile():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v19.0/24680135790"
        assert request.url.params["access_token"] == "token-1"
        return httpx.Response(
            200, json={"first_name": "Jane", "last_name": "Doe", "profile_pic": "p.png"}
        )

    profile = await adapter_with(handler).fetch_profile("24680135790", "token-1")
    assert profile.display_name == "Jane Doe"
    assert profile.avatar == "p.png"


@pytest.mark.asyncio
async def test_fetch_profile_failure():
    adapter = adapter_with(lambda request: httpx.Response(400, json={"error": {}}))
    with pytest.raises(TransportError):
        await adapter.fetch_profile("u1", "token-1")


@pytest.mark.asyncio
async def test_send_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"recipient_id": "u1", "message_id": "m_out_1"})

    receipt = await adapter_with(handler).send_text("u1", "token-1", "Hello")

    assert receipt == "m_out_1"
    assert seen["path"] == "/v19.0/me/messages"
    assert seen["body"] == {
        "recipient": {"id": "u1"},
        "messaging_type": "RESPONSE",
        "message": {"text": "Hello"},
    }


@pytest.mark.asyncio
async def test_send_text_without_receipt_is_failure():
    adapter = adapter_with(lambda request: httpx.Response(200, json={}))
    with pytest.raises(TransportError):
        await adapter.send_text("u1", "token-1", "Hello")


@pytest.mark.asyncio
async def test_send_media():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"message_id": "m_out_2"})

    await adapter_with(handler).send_media(
        "u1", "token-1", Attachment(kind="image", url="https://cdn/a.jpg")
    )
    assert seen["body"]["message"]["attachment"] == {
        "type": "image",
        "payload": {"url": "https://cdn/a.jpg", "is_reusable": True},
    }


@pytest.mark.asyncio
async def test_send_outbound():
    adapter = adapter_with(lambda request: httpx.Response(200, json={"message_id": "m_out_3"}))
    result = await adapter.send(
        OutboundMessage(channel=Channel.MESSENGER, page_id="p1", external_user_id="u1", text="Hi")
    )
    assert result.success is True
    assert result.platform_message_id == "m_out_3"


@pytest.mark.asyncio
async def test_send_outbound_unknown_page():
    adapter = adapter_with(lambda request: httpx.Response(200, json={"message_id": "x"}))
    result = await adapter.send(
        OutboundMessage(channel=Channel.MESSENGER, page_id="p9", external_user_id="u1", text="Hi")
    )
    assert result.success is False


@pytest.mark.asyncio
async def test_send_outbound_media_only_skips_text():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"message_id": f"m_out_{len(bodies)}"})

    result = await adapter_with(handler).send(
        OutboundMessage(
            channel=Channel.MESSENGER,
            page_id="p1",
            external_user_id="u1",
            text="  ",
            attachments=[Attachment(kind="image", url="https://cdn/a.jpg")],
        )
    )

    assert result.success is True
    assert result.platform_message_id == "m_out_1"
    assert len(bodies) == 1
    assert "text" not in bodies[0]["message"]
    assert bodies[0]["message"]["attachment"]["type"] == "image"


@pytest.mark.asyncio
async def test_send_outbound_with_nothing_to_send():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    result = await adapter_with(handler).send(
        OutboundMessage(channel=Channel.MESSENGER, page_id="p1", external_user_id="u1", text="")
    )
    assert result.success is False
