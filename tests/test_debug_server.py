"""Tests for the FastAPI debug server."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cyync_server.core.error import TransportError
from cyync_server.debug_server import app, get_transport

LOOKUP_BODY = {
    "entities": [{"value": "8.8.8.8", "types": ["IPv4"]}, {"value": "example.com", "types": ["domain"]}],
    "url": "https://staging.cyync.com",
    "access_token": "token-123",
    "workspace_ids": ["ws-1"],
    "search_scopes": ["assets", "tasks"],
}


@pytest.fixture
def transport(fake_transport_cls):
    return fake_transport_cls(
        responses={
            ("8.8.8.8", "assets"): [{"id": "a-1", "riskScore": 9}],
            ("8.8.8.8", "tasks"): [{"id": "t-1", "status": "active"}],
        }
    )


@pytest.fixture
def client(transport):
    app.dependency_overrides[get_transport] = lambda: transport
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    assert client.get("/").json() == {"status": "ok", "service": "CYYNC Lookup Debug Server"}
    assert client.get("/health").json() == {"status": "healthy"}


def test_scopes(client) -> None:
    scopes = client.get("/scopes").json()["scopes"]
    assert [s["value"] for s in scopes] == ["assets", "forms", "pages", "tasks"]


def test_lookup(client, transport) -> None:
    response = client.post("/lookup", json=LOOKUP_BODY)

    assert response.status_code == 200
    body = response.json()
    assert body["n_entities"] == 2
    assert body["n_matched"] == 1
    assert body["results"][0]["data"]["summary"] == ["Assets: 1", "High Risk: 1", "Tasks: 1", "Active: 1"]
    assert body["results"][1]["data"] is None
    assert len(transport.started) == 4


def test_lookup_invalid_options(client, transport) -> None:
    response = client.post("/lookup", json={**LOOKUP_BODY, "search_scopes": ["users"]})

    assert response.status_code == 400
    assert response.json()["detail"]["errors"][0]["key"] == "searchScopes"
    assert transport.started == []


def test_lookup_failure(client, transport) -> None:
    transport.failures = {0: TransportError("Request failed", status=500, description="boom")}

    response = client.post("/lookup", json=LOOKUP_BODY)

    assert response.status_code == 502
    assert response.json()["detail"]["detail"] == "Request failed - (500)"
    assert response.json()["detail"]["status"] == 500


def test_lookup_requires_entities(client) -> None:
    assert client.post("/lookup", json={**LOOKUP_BODY, "entities": []}).status_code == 422


def test_debug_plan(client) -> None:
    response = client.post("/debug/plan", json=LOOKUP_BODY)

    assert response.status_code == 200
    assert response.json()["n_requests"] == 4
    assert response.json()["requests"][0]["endpoint"] == "workspaces/ws-1/assets/"
