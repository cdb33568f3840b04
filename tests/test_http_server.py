# Coda MCP Server
# File: tests/test_http_server.py
# Version: v1

import pytest
from starlette.responses import JSONResponse
from starlette.testclient import TestClient

from coda_mcp.transports import http_server


@pytest.fixture
def client() -> TestClient:
    return TestClient(http_server.create_app())


def test_missing_api_key_is_rejected_with_401(client, monkeypatch) -> None:
    created = []
    monkeypatch.setattr(http_server, "create_server", lambda *a, **k: created.append(a))

    response = client.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

    assert response.status_code == 401
    body = response.json()
    assert body["error"] == "Unauthorized"
    assert body["required_headers"] == ["X-Coda-API-Key"]
    assert "X-Coda-API-Key" in body["message"]
    assert created == []


def test_blank_api_key_is_rejected(client) -> None:
    response = client.post("/mcp", json={}, headers={"X-Coda-API-Key": "  "})
    assert response.status_code == 401


def test_each_request_gets_its_own_server(client, monkeypatch) -> None:
    created = []
    dispatched = []
    original = http_server.create_server

    def recording_create_server(credentials, config=None):
        created.append(credentials)
        return original(credentials, config)

    async def fake_dispatch(server, scope, receive, send):
        dispatched.append(server)
        await JSONResponse({"ok": True})(scope, receive, send)

    monkeypatch.setattr(http_server, "create_server", recording_create_server)
    monkeypatch.setattr(http_server, "_dispatch", fake_dispatch)

    for key in ("alice-key", "bob-key"):
        response = client.post(
            "/mcp",
            json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
            headers={"X-Coda-API-Key": key},
        )
        assert response.status_code == 200

    assert [c.api_key for c in created] == ["alice-key", "bob-key"]
    assert len(dispatched) == 2
    assert dispatched[0] is not dispatched[1]


def test_base_url_header_reaches_the_tenant_server(client, monkeypatch) -> None:
    created = []

    def recording_create_server(credentials, config=None):
        created.append(credentials)
        return object()

    async def fake_dispatch(server, scope, receive, send):
        await JSONResponse({})(scope, receive, send)

    monkeypatch.setattr(http_server, "create_server", recording_create_server)
    monkeypatch.setattr(http_server, "_dispatch", fake_dispatch)

    client.post(
        "/mcp",
        json={},
        headers={"X-Coda-API-Key": "k", "X-Coda-Base-URL": "https://coda.example.test/apis/v1"},
    )

    assert created[0].base_url == "https://coda.example.test/apis/v1"


def test_mcp_only_accepts_post(client) -> None:
    response = client.get("/mcp", headers={"X-Coda-API-Key": "k"})
    assert response.status_code == 405
    assert response.headers["allow"] == "POST"


def test_tools_list_over_streamable_http(client) -> None:
    response = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": {}},
        headers={
            "X-Coda-API-Key": "k",
            "Accept": "application/json, text/event-stream",
        },
    )

    assert response.status_code == 200
    names = {tool["name"] for tool in response.json()["result"]["tools"]}
    assert "coda_list_rows" in names
    assert "coda_test_connection" in names


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "server": "coda-mcp"}


def test_info_document(client) -> None:
    body = client.get("/").json()

    assert body["name"] == "coda-mcp"
    assert body["authentication"]["required_headers"] == ["X-Coda-API-Key"]
    assert body["endpoints"]["mcp"] == "POST /mcp"
    assert len(body["tools"]) == 38
    assert "coda_upsert_rows" in body["tools"]


def test_sse_is_not_implemented(client) -> None:
    response = client.get("/sse")
    assert response.status_code == 501
    assert "streamable HTTP" in response.text
