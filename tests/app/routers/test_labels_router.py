"""Tests for labels API."""

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


def test_list_labels_paginated(client: TestClient, setup_default_labels):
    resp = client.get("/labels", params={"page": 1, "size": 3})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == len(setup_default_labels)
    assert len(body["items"]) == 3


def test_create_label(client: TestClient):
    resp = client.post("/labels", json={"name": "Hot-Lead", "emoji": "🔥"})
    assert resp.status_code == 201
    assert resp.json()["name"] == "hot-lead"

    duplicate = client.post("/labels", json={"name": "hot-lead"})
    assert duplicate.status_code == 409


def test_get_and_delete_label(client: TestClient, setup_label):
    label_id, name = setup_label.id, setup_label.name
    assert client.get(f"/labels/{label_id}").json()["name"] == name
    assert client.delete(f"/labels/{label_id}").status_code == 204
    assert client.get(f"/labels/{label_id}").status_code == 404


def test_customer_labels(client: TestClient, setup_customer, setup_default_labels):
    url = f"/labels/customers/{setup_customer.id}"

    assigned = client.post(url, json={"label_name": "vip"})
    assert assigned.status_code == 201
    assert [label["name"] for label in client.get(url).json()] == ["vip"]

    assert client.delete(f"{url}/vip").status_code == 204
    assert client.get(url).json() == []
    assert client.delete(f"{url}/vip").status_code == 404


def test_assign_unknown_label(client: TestClient, setup_customer):
    resp = client.post(f"/labels/customers/{setup_customer.id}", json={"label_name": "nope"})
    assert resp.status_code == 404


def test_labels_of_unknown_customer(client: TestClient):
    assert client.get("/labels/customers/424242").status_code == 404
