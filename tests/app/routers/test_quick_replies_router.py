"""Tests for quick replies API."""

import pytest
from fastapi.testclient import TestClient

from app.db import get_db
from app.main import create_app


@pytest.fixture
def client(db, app_state):
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


def test_list_quick_replies(client: TestClient, setup_quick_replies):
    resp = client.get("/quick-replies")
    assert resp.status_code == 200
    assert resp.json()["total"] == len(setup_quick_replies)
    assert resp.json()["items"][0]["key"] == "chao"


def test_quick_reply_crud(client: TestClient):
    created = client.post(
        "/quick-replies",
        json={"key": "gia", "emoji": "💰", "text_vi": "Giá là", "text_en": "The price is"},
    )
    assert created.status_code == 201
    qr_id = created.json()["id"]

    assert client.post(
        "/quick-replies", json={"key": "gia", "text_vi": "x", "text_en": "y"}
    ).status_code == 409

    patched = client.patch(f"/quick-replies/{qr_id}", json={"text_en": "Price:"})
    assert patched.json()["text_en"] == "Price:"
    assert patched.json()["text_vi"] == "Giá là"

    assert client.delete(f"/quick-replies/{qr_id}").status_code == 204
    assert client.get(f"/quick-replies/{qr_id}").status_code == 404
