#!/usr/bin/env python3
"""apollo-mcp - MCP gateway to the Apollo sales-intelligence API.

Usage:
    apollo-mcp                                        # streamable HTTP (default)
    apollo-mcp --transport jsonrpc --port 8000        # plain JSON-RPC endpoint
    apollo-mcp --transport stdio                      # desktop clients
    python -m apollo_mcp.server                       # module mode

Environment:
    APOLLO_API_KEY          Apollo API key (required)
    APOLLO_BASE_URL         Upstream base URL (default: https://api.apollo.io/v1)
    PORT                    HTTP port (default: 8000)
    See config.py for full list.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from typing import Any, AsyncIterator

from mcp.server.fastmcp import FastMCP
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from apollo_mcp import tools as T
from apollo_mcp.config import ApolloMcpConfig
from apollo_mcp.embedded import register_tools
from apollo_mcp.upstream import ApolloClient
from apollo_mcp.web import ClientCompatMiddleware, RequestLogMiddleware, health, not_found

logger = logging.getLogger(__name__)

TRANSPORTS = ("streamable-http", "jsonrpc", "stdio")

INSTRUCTIONS = (
    "Apollo sales-intelligence tools. "
    "apollo.searchCompanies and apollo.searchPeople find prospects. "
    "apollo.getEmailsAndPhone reveals contact details for one person (may use credits). "
    "apollo.enrichPersonBulk enriches many people by id or email."
)


def closing_lifespan(gateway: T.ToolGateway):
    """FastMCP lifespan closing the upstream client when a stdio session ends."""

    @contextlib.asynccontextmanager
    async def lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
        try:
            yield {}
        finally:
            await gateway.client.close()

    return lifespan


def build_server(
    config: ApolloMcpConfig,
    gateway: T.ToolGateway,
    *,
    lifespan=None,
) -> FastMCP:
    """FastMCP server with the Apollo tools and health routes registered.

    Stateless and in JSON-response mode so clients need not track session ids.
    A stateless server enters ``lifespan`` once per request, so HTTP callers
    leave it unset and close the client in build_streamable_app instead.
    """
    mcp = FastMCP(
        "apollo-mcp",
        instructions=INSTRUCTIONS,
        host=config.host,
        port=config.port,
        stateless_http=True,
        json_response=True,
        lifespan=lifespan,
    )
    register_tools(mcp, config=config, gateway=gateway)

    @mcp.custom_route("/", methods=["GET"])
    async def root(request: Request) -> JSONResponse:
        return await health(request)

    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return await health(request)

    return mcp


def build_streamable_app(mcp: FastMCP, gateway: T.ToolGateway):
    """Wrap the SDK's streamable-HTTP app with CORS, client fixes and request logging.

    The app's lifespan runs the SDK session manager and closes the upstream
    client on shutdown.
    """
    app = mcp.streamable_http_app()
    app.add_exception_handler(404, not_found)
    app.add_exception_handler(405, not_found)

    session_lifespan = app.router.lifespan_context

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app):
        async with session_lifespan(starlette_app):
            try:
                yield
            finally:
                await gateway.client.close()

    app.router.lifespan_context = lifespan

    wrapped = ClientCompatMiddleware(app)
    wrapped = CORSMiddleware(
        wrapped,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"],
    )
    return RequestLogMiddleware(wrapped)


def _parse_args(args: list[str]) -> tuple[str, str | None, int | None]:
    transport = "streamable-http"
    port: int | None = None
    host: str | None = None
    for i, arg in enumerate(args):
        if arg == "--transport" and i + 1 < len(args):
            transport = args[i + 1]
        elif arg == "--port" and i + 1 < len(args):
            port = int(args[i + 1])
        elif arg == "--host" and i + 1 < len(args):
            host = args[i + 1]
    if transport not in TRANSPORTS:
        raise ValueError(f"Invalid --transport '{transport}'. Expected: {' | '.join(TRANSPORTS)}")
    return transport, host, port


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        transport, host, port = _parse_args(sys.argv[1:])
        config = ApolloMcpConfig.from_env()
    except ValueError as exc:
        logger.error("Failed to start apollo-mcp: %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(config.numeric_log_level)
    logger.info("Starting apollo-mcp (%s) with %r", transport, config)

    if transport == "stdio":
        gateway = T.ToolGateway(ApolloClient(config))
        build_server(config, gateway, lifespan=closing_lifespan(gateway)).run(transport="stdio")
        return

    import uvicorn

    if transport == "jsonrpc":
        from apollo_mcp.app import create_app

        app = create_app(config)
    else:
        gateway = T.ToolGateway(ApolloClient(config))
        app = build_streamable_app(build_server(config, gateway), gateway)

    uvicorn.run(
        app,
        host=host or config.host,
        port=port or config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
