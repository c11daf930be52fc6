"""Gateway error hierarchy.

Every error carries the JSON-RPC code it is reported with, so the transports
can turn any GatewayError into an error envelope without inspecting it.
"""

from __future__ import annotations

# JSON-RPC 2.0 codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
UPSTREAM_ERROR = -32000

MAX_BODY_IN_MESSAGE = 500


class GatewayError(Exception):
    """Base class for errors reported back to the MCP caller."""

    code = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def is_client_error(self) -> bool:
        """True when the caller sent something we refused before any upstream call."""
        return self.code in (INVALID_REQUEST, METHOD_NOT_FOUND, INVALID_PARAMS)

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": self.message}


class ToolNotFoundError(GatewayError):
    """Raised when tools/call names a tool that is not registered."""

    code = METHOD_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidToolArguments(GatewayError):
    """Raised when tool arguments fail validation."""

    code = INVALID_PARAMS


class UpstreamError(GatewayError):
    """The upstream API answered with a non-2xx status."""

    code = UPSTREAM_ERROR

    def __init__(self, status_code: int, body: str) -> None:
        if len(body) > MAX_BODY_IN_MESSAGE:
            body = body[:MAX_BODY_IN_MESSAGE] + "..."
        super().__init__(f"Apollo API returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class UpstreamUnavailable(GatewayError):
    """The upstream call failed entirely or returned something unparseable."""

    code = INTERNAL_ERROR
