"""Shared test fixtures."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from apollo_mcp.config import ApolloMcpConfig
from apollo_mcp.tools import ToolGateway
from apollo_mcp.upstream import ApolloClient

TEST_KEY = "test-key"
BASE_URL = "https://apollo.test/v1"


class FakeApollo:
    """Records every outbound request and answers from a canned handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {}
        self.handler: Callable[[httpx.Request], httpx.Response] | None = None

    def respond(self, payload: Any = None, status_code: int = 200) -> None:
        self.payload = payload if payload is not None else {}
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict[str, Any]:
        return json.loads(self.last.content)


@pytest.fixture
def config():
    return ApolloMcpConfig(api_key=TEST_KEY, base_url=BASE_URL)


@pytest.fixture
def apollo():
    return FakeApollo()


@pytest.fixture
def client(config, apollo):
    return ApolloClient(config, transport=httpx.MockTransport(apollo))


@pytest.fixture
def gateway(client):
    return ToolGateway(client)
