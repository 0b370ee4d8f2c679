"""Tests for webhook routes."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.constants.notices import OperatorNotices
from app.db import get_db
from app.main import create_app
from app.models.customer import Customer
from app.models.message_mapping import MessageMapping
from app.models.pending_reply import PendingReply


@pytest.fixture
def client_no_auth(db, app_state):
    """Client with db override and mocked channel adapters (webhooks carry no auth)."""
    app = create_app(testing=True)
    app.state.relay = app_state

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def page_webhook(text="How much?", page_id="p1"):
    return {
        "object": "page",
        "entry": [
            {
                "id": page_id,
                "time": 1760860800000,
                "messaging": [
                    {
                        "sender": {"id": "24680135790"},
                        "recipient": {"id": page_id},
                        "timestamp": 1760860800000,
                        "message": {"mid": "m_1", "text": text},
                    }
                ],
            }
        ],
    }


def group_reply_update(text="Xin chào", reply_to=1001):
    chat = {"id": -1001234567890, "type": "supergroup", "title": "Shop operators"}
    return {
        "update_id": 123,
        "message": {
            "message_id": 456,
            "from": {"id": 789, "is_bot": False, "first_name": "Minh"},
            "chat": chat,
            "date": 1609459200,
            "text": text,
            "reply_to_message": {
                "message_id": reply_to,
                "from": {"id": 1, "is_bot": True, "first_name": "Relay"},
                "chat": chat,
                "date": 1609459100,
                "text": "relayed",
            },
        },
    }


def settings_with(**values):
    settings = MagicMock()
    settings.telegram_webhook_secret = None
    settings.fb_verify_token = None
    for key, value in values.items():
        setattr(settings, key, value)
    return settings


@patch("app.commands.webhooks.messenger_command.get_settings")
def test_facebook_verification(mock_settings, client_no_auth: TestClient):
    mock_settings.return_value = settings_with(fb_verify_token="verify-me")
    resp = client_no_auth.get(
        "/webhooks/facebook",
        params={"hub.mode": "subscribe", "hub.verify_token": "verify-me", "hub.challenge": "c123"},
    )
    assert resp.status_code == 200
    assert resp.text == "c123"


@patch("app.commands.webhooks.messenger_command.get_settings")
def test_facebook_verification_rejected(mock_settings, client_no_auth: TestClient):
    mock_settings.return_value = settings_with(fb_verify_token="verify-me")
    resp = client_no_auth.get(
        "/webhooks/facebook",
        params={"hub.mode": "subscribe", "hub.verify_token": "nope", "hub.challenge": "c123"},
    )
    assert resp.status_code == 403


def test_facebook_webhook_relays_message(client_no_auth: TestClient, db, operator_channel):
    resp = client_no_auth.post("/webhooks/facebook", json=page_webhook())

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "relayed": 1}
    operator_channel.send_message.assert_awaited_once()
    assert db.query(Customer).count() == 1
    assert db.get(MessageMapping, "1001") is not None


def test_facebook_webhook_unknown_page_is_skipped(client_no_auth: TestClient, operator_channel):
    resp = client_no_auth.post("/webhooks/facebook", json=page_webhook(page_id="p9"))
    assert resp.json() == {"status": "ok", "relayed": 0}
    operator_channel.send_message.assert_not_awaited()


def test_facebook_webhook_wrong_object(client_no_auth: TestClient):
    resp = client_no_auth.post("/webhooks/facebook", json={"object": "user", "entry": []})
    assert resp.status_code == 400


def test_facebook_webhook_without_operator_group(client_no_auth: TestClient, app_state):
    app_state.telegram = None
    resp = client_no_auth.post("/webhooks/facebook", json=page_webhook())
    assert resp.status_code == 503


def test_telegram_webhook_disabled(client_no_auth: TestClient, app_state):
    app_state.telegram = None
    resp = client_no_auth.post("/webhooks/telegram", json=group_reply_update())
    assert resp.status_code == 503


@patch("app.commands.webhooks.telegram_command.get_settings")
def test_telegram_webhook_invalid_secret(mock_cmd_settings, client_no_auth: TestClient):
    mock_cmd_settings.return_value = settings_with(telegram_webhook_secret="secret")
    resp = client_no_auth.post(
        "/webhooks/telegram",
        json=group_reply_update(),
        headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
    )
    assert resp.status_code == 403


def test_telegram_reply_is_staged(client_no_auth: TestClient, db, operator_channel, translator):
    translator.add("Xin chào", "en", "Hello", detected="vi")
    client_no_auth.post("/webhooks/facebook", json=page_webhook())

    resp = client_no_auth.post("/webhooks/telegram", json=group_reply_update())

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    pending = db.query(PendingReply).one()
    assert pending.translated_text == "Hello"
    assert operator_channel.send_message.await_args.kwargs["reply_to"] == "456"


def test_telegram_reply_to_unknown_message(client_no_auth: TestClient, operator_channel):
    resp = client_no_auth.post("/webhooks/telegram", json=group_reply_update(reply_to=999))
    assert resp.status_code == 200
    assert operator_channel.send_message.await_args.args[0] == OperatorNotices.CUSTOMER_NOT_FOUND


def test_telegram_plain_chatter_is_ignored(client_no_auth: TestClient):
    update = group_reply_update()
    del update["message"]["reply_to_message"]
    resp = client_no_auth.post("/webhooks/telegram", json=update)
    assert resp.json() == {"status": "ignored"}


def test_telegram_button_press_is_acknowledged(client_no_auth: TestClient, operator_channel):
    update = {
        "update_id": 124,
        "callback_query": {
            "id": "cbq-1",
            "from": {"id": 789, "is_bot": False, "first_name": "Minh"},
            "chat_instance": "ci-1",
            "data": "frobnicate_x",
        },
    }
    resp = client_no_auth.post("/webhooks/telegram", json=update)
    assert resp.status_code == 200
    operator_channel.acknowledge.assert_awaited_once_with("cbq-1", None)


def test_health(client_no_auth: TestClient):
    resp = client_no_auth.get("/health")
    assert resp.json() == {"status": "ok", "pages": 1}
