"""HTTP-level tests for the plain JSON-RPC app."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from apollo_mcp.app import MAX_BODY_BYTES, create_app
from apollo_mcp.errors import INVALID_PARAMS, INVALID_REQUEST, PARSE_ERROR


@pytest.fixture
def http(config, gateway):
    return TestClient(create_app(config, gateway=gateway))


@pytest.mark.parametrize("path", ["/", "/health"])
def test_health_routes(http, path):
    resp = http.get(path)
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_unknown_route_is_json_404(http):
    resp = http.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not found"}


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_wrong_method_on_mcp_is_json_404(http, method):
    resp = http.request(method, "/mcp")
    assert resp.status_code == 404
    assert resp.json() == {"message": "Not found"}


def test_initialize_over_http(http):
    resp = http.post("/mcp", json={"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}})
    assert resp.status_code == 200
    assert resp.json()["result"]["serverInfo"]["name"] == "apollo-mcp"


def test_search_companies_over_http(http, apollo):
    apollo.respond({"organizations": [{"name": "Acme Corp", "city": "Lyon"}]})

    resp = http.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": "x1",
            "method": "tools/call",
            "params": {"name": "apollo.searchCompanies", "arguments": {"keyword": "acme"}},
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "x1"
    assert body["result"]["structuredContent"]["companies"][0]["city"] == "Lyon"
    assert len(apollo.requests) == 1


def test_text_plain_body_is_parsed(http):
    resp = http.post(
        "/mcp",
        content=b'{"jsonrpc": "2.0", "id": 2, "method": "ping"}',
        headers={"Content-Type": "text/plain"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"jsonrpc": "2.0", "id": 2, "result": {}}


def test_invalid_json_is_parse_error(http):
    resp = http.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == PARSE_ERROR
    assert resp.json()["id"] is None


def test_oversized_body_is_rejected(http):
    resp = http.post("/mcp", content=b" " * (MAX_BODY_BYTES + 1), headers={"Content-Type": "application/json"})
    assert resp.status_code == 413
    assert resp.json()["error"]["code"] == INVALID_REQUEST


def test_notification_is_accepted_without_body(http):
    resp = http.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 202
    assert resp.content == b""


def test_validation_error_preserves_id_and_skips_upstream(http, apollo):
    resp = http.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 99,
            "method": "tools/call",
            "params": {"name": "apollo.enrichPersonBulk", "arguments": {}},
        },
    )
    assert resp.status_code == 400
    assert resp.json()["id"] == 99
    assert resp.json()["error"]["code"] == INVALID_PARAMS
    assert apollo.requests == []


def test_server_keeps_serving_after_upstream_429(http, apollo):
    call = {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "tools/call",
        "params": {"name": "apollo.searchPeople", "arguments": {"company": "Acme"}},
    }
    apollo.respond({"error": "rate limit"}, status_code=429)
    first = http.post("/mcp", json=call)
    assert first.status_code == 500
    assert "429" in first.json()["error"]["message"]

    apollo.respond({"people": [{"first_name": "Ada"}]})
    second = http.post("/mcp", json=call)
    assert second.status_code == 200
    assert second.json()["result"]["structuredContent"]["leads"][0]["first_name"] == "Ada"


def test_lifespan_closes_upstream_client(config, gateway):
    with TestClient(create_app(config, gateway=gateway)) as http:
        assert http.get("/health").status_code == 200
    assert gateway.client._client.is_closed
