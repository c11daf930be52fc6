"""JSON-RPC 2.0 envelope handling for the plain /mcp endpoint.

``dispatch`` turns one decoded request object into an HTTP status and a
response envelope. It never raises: every failure is scoped to the request.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from apollo_mcp.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    GatewayError,
)
from apollo_mcp.tools import ToolGateway

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"


def success(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def parse_error(message: str = "Parse error") -> dict[str, Any]:
    return error(None, PARSE_ERROR, message)


def tool_result(output: Any) -> dict[str, Any]:
    """Wrap tool output the way MCP clients expect a tools/call result."""
    return {
        "content": [{"type": "text", "text": json.dumps(output, ensure_ascii=False)}],
        "structuredContent": output,
        "isError": False,
    }


async def dispatch(
    gateway: ToolGateway, message: Any
) -> tuple[int, dict[str, Any] | None]:
    """Handle one JSON-RPC request object.

    Returns (http_status, envelope). Notifications yield (202, None).
    """
    if not isinstance(message, dict):
        return 400, error(None, INVALID_REQUEST, "Invalid Request: expected a JSON object")

    request_id = message.get("id")
    method = message.get("method")
    if message.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str):
        return 400, error(request_id, INVALID_REQUEST, "Invalid Request")

    if "id" not in message:
        logger.debug("Notification %s acknowledged", method)
        return 202, None

    params = message.get("params")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        return 400, error(request_id, INVALID_PARAMS, "Invalid params: expected an object")

    try:
        if method == "initialize":
            return 200, success(request_id, gateway.initialize())
        if method == "tools/list":
            return 200, success(request_id, gateway.list_tools())
        if method == "ping":
            return 200, success(request_id, gateway.ping())
        if method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str) or not name:
                return 400, error(request_id, INVALID_PARAMS, "Invalid params: missing tool name")
            output = await gateway.call_tool(name, params.get("arguments"))
            return 200, success(request_id, tool_result(output))
    except GatewayError as exc:
        status = 400 if exc.is_client_error else 500
        return status, error(request_id, exc.code, exc.message)
    except Exception:
        logger.error("Unhandled error in %s", method, exc_info=True)
        return 500, error(request_id, INTERNAL_ERROR, "Internal error")

    return 400, error(request_id, METHOD_NOT_FOUND, "Method not found")
