"""Plain JSON-RPC transport: a Starlette app serving POST /mcp.

Usage:
    from apollo_mcp.app import create_app
    app = create_app(ApolloMcpConfig.from_env())
    uvicorn.run(app, port=8000)
"""

from __future__ import annotations

import contextlib
import json
import logging

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from apollo_mcp import rpc
from apollo_mcp.config import ApolloMcpConfig
from apollo_mcp.errors import INVALID_REQUEST
from apollo_mcp.tools import ToolGateway
from apollo_mcp.upstream import ApolloClient
from apollo_mcp.web import RequestLogMiddleware, health, not_found

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 1024 * 1024


def create_app(
    config: ApolloMcpConfig,
    gateway: ToolGateway | None = None,
) -> Starlette:
    """Build the JSON-RPC app. Pass ``gateway`` to reuse a pre-built one (tests)."""
    if gateway is None:
        gateway = ToolGateway(ApolloClient(config))

    async def mcp_endpoint(request: Request) -> Response:
        raw = await request.body()
        if len(raw) > MAX_BODY_BYTES:
            return JSONResponse(
                rpc.error(None, INVALID_REQUEST, "Request body too large"), status_code=413
            )
        try:
            message = json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            return JSONResponse(rpc.parse_error(), status_code=400)

        status, envelope = await rpc.dispatch(gateway, message)
        if envelope is None:
            return Response(status_code=status)
        return JSONResponse(envelope, status_code=status)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info("apollo-mcp JSON-RPC endpoint ready at /mcp")
        try:
            yield
        finally:
            await gateway.client.close()

    return Starlette(
        routes=[
            Route("/", health, methods=["GET"]),
            Route("/health", health, methods=["GET"]),
            Route("/mcp", mcp_endpoint, methods=["POST"]),
        ],
        middleware=[Middleware(RequestLogMiddleware)],
        exception_handlers={404: not_found, 405: not_found},
        lifespan=lifespan,
    )
