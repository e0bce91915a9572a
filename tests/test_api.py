"""
Tests for the versioner API endpoints.

These tests use FastAPI TestClient with the graph store dependency
overridden to point at an in‑memory SQLite database.
"""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from api.deps import get_settings, get_store
from api.main import app
from chronograph.graph_db import DBGraphStore
from chronograph.settings import Settings


@pytest.fixture
def client(engine):
    def _store():
        with DBGraphStore(Session(engine)) as store:
            yield store

    app.dependency_overrides[get_store] = _store
    yield TestClient(app)
    app.dependency_overrides.clear()


def _new_entity(client, state=None):
    resp = client.post("/entities", json={"label": "Company", "state": state, "date": 100})
    assert resp.status_code == 201
    return resp.json()["id"]


def test_health(client):
    body = client.get("/").json()
    assert body == {"status": "ok", "msg": "Chronograph API is alive"}


def test_health_reads_injected_settings(client):
    app.dependency_overrides[get_settings] = lambda: Settings(api_title="History Service")
    assert client.get("/").json()["msg"] == "History Service is alive"


def test_create_entity(client):
    resp = client.post("/entities", json={"properties": {"name": "ACME"}})
    assert resp.status_code == 201
    body = resp.json()
    assert body["labels"] == ["Entity"]
    assert body["properties"] == {"name": "ACME"}


def test_patch_then_update(client):
    entity = _new_entity(client, {"a": 1, "b": 2})

    resp = client.post(f"/entities/{entity}/patch",
                       json={"properties": {"b": 3, "c": 4}, "date": 200})
    assert resp.status_code == 201
    assert resp.json()["properties"] == {"a": 1, "b": 3, "c": 4}

    resp = client.post(f"/entities/{entity}/update",
                       json={"properties": {"x": 9}, "additional_label": "Final", "date": 300})
    assert resp.status_code == 201
    state = resp.json()
    assert state["properties"] == {"x": 9}
    assert state["labels"] == ["State", "Final"]

    graph = client.get("/graph").json()
    current = [l for l in graph["links"] if l["type"] == "CURRENT"]
    assert len(current) == 1
    assert current[0]["target"] == state["id"]
    assert current[0]["properties"] == {"date": 300}


def test_patch_from_unlinked_state_is_conflict(client):
    entity = _new_entity(client, {"a": 1})
    other = _new_entity(client, {"z": 1})
    other_state = [l["target"] for l in client.get("/graph").json()["links"]
                   if l["type"] == "CURRENT" and l["source"] == other][0]
    before = client.get("/graph").json()

    resp = client.post(f"/entities/{entity}/patch-from", json={"state_id": other_state})
    assert resp.status_code == 409
    assert str(other_state) in resp.json()["detail"]
    assert client.get("/graph").json() == before


def test_unknown_entity_is_not_found(client):
    resp = client.post("/entities/999/patch", json={"properties": {"a": 1}})
    assert resp.status_code == 404
    assert client.get("/graph").json() == {"nodes": [], "links": []}


def test_get_node(client):
    entity = _new_entity(client)
    assert client.get(f"/nodes/{entity}").json()["labels"] == ["Entity", "Company"]
    assert client.get("/nodes/999").status_code == 404
