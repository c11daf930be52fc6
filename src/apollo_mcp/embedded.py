"""Embedded mode: register the Apollo tools on an existing FastMCP server.

Usage:
    from mcp.server.fastmcp import FastMCP
    from apollo_mcp import register_tools

    mcp = FastMCP("My App")
    register_tools(mcp)
    mcp.run()

The Apollo tools are served from the static tool table and receive the raw
``arguments`` object, so the gateway's own validation (unknown keys rejected,
no type coercion) applies on every transport. Tools the host registers with
``@mcp.tool()`` keep working through FastMCP as before.
"""

from __future__ import annotations

import json
from typing import Any, Callable

from mcp import types

from apollo_mcp import tools as T
from apollo_mcp.config import ApolloMcpConfig
from apollo_mcp.upstream import ApolloClient

TOOL_NAMES = frozenset(d["name"] for d in T.TOOL_DEFINITIONS)


def tool_content(output: Any) -> tuple[list[types.TextContent], dict[str, Any]]:
    """(unstructured, structured) pair as the SDK expects from a tools/call handler."""
    structured = output if isinstance(output, dict) else {"result": output}
    text = json.dumps(output, ensure_ascii=False)
    return [types.TextContent(type="text", text=text)], structured


def register_tools(
    mcp: Any,
    *,
    config: ApolloMcpConfig | None = None,
    gateway: T.ToolGateway | None = None,
) -> dict[str, Callable[..., Any]]:
    """Register the 4 Apollo tools on an existing FastMCP server.

    Three modes:
    1. No args: loads config from env on first call.
    2. Config only: builds the gateway from the provided config.
    3. Gateway provided: uses it directly (useful for testing).

    Returns:
        Dict of tool name -> async callable taking the tool arguments as
        keyword arguments, for direct invocation.
    """
    # Closure-captured state (not globals, for multi-MCP isolation)
    _state: dict[str, Any] = {"gateway": gateway, "config": config}

    def _gateway() -> T.ToolGateway:
        if _state["gateway"] is None:
            cfg = _state["config"] or ApolloMcpConfig.from_env()
            _state["config"] = cfg
            _state["gateway"] = T.ToolGateway(ApolloClient(cfg))
        return _state["gateway"]

    server = mcp._mcp_server

    async def list_tools() -> list[types.Tool]:
        apollo = [types.Tool.model_validate(d) for d in T.TOOL_DEFINITIONS]
        hosted = [t for t in await mcp.list_tools() if t.name not in TOOL_NAMES]
        return apollo + hosted

    async def call_tool(name: str, arguments: dict[str, Any] | None) -> Any:
        if name not in TOOL_NAMES:
            return await mcp.call_tool(name, arguments or {})
        # GatewayError propagates; the SDK turns it into an isError result
        output = await _gateway().call_tool(name, arguments)
        return tool_content(output)

    server.list_tools()(list_tools)
    # Input is validated by the gateway's argument models, not the SDK
    server.call_tool(validate_input=False)(call_tool)

    def _direct(name: str) -> Callable[..., Any]:
        async def invoke(**arguments: Any) -> Any:
            return await _gateway().call_tool(name, arguments)

        invoke.__name__ = name.rsplit(".", 1)[-1]
        return invoke

    return {name: _direct(name) for name in sorted(TOOL_NAMES)}

