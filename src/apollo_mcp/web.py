"""HTTP pieces shared by both transports: health routes, 404 body, ASGI middleware."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

EVENT_STREAM = "text/event-stream"


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"message": "Not found"}, status_code=404)


def _header(scope, name: bytes) -> str:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return ""


class RequestLogMiddleware:
    """ASGI middleware logging one line per HTTP request (never the body)."""

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] == "http":
            logger.info(
                "http_request method=%s path=%s accept=%r content_type=%r",
                scope.get("method"),
                scope.get("path"),
                _header(scope, b"accept"),
                _header(scope, b"content-type"),
            )
        await self.app(scope, receive, send)


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Accept",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


class ClientCompatMiddleware:
    """ASGI middleware smoothing over clients the streamable transport would refuse.

    - adds text/event-stream to Accept when missing
    - treats a text or missing Content-Type on POST as application/json
    - answers any bare OPTIONS with 200 and the CORS headers

    Several browser-based agent builders send only application/json or post
    text/plain bodies, and some send OPTIONS outside a CORS preflight.
    """

    def __init__(self, app) -> None:
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope.get("method") == "OPTIONS":
            response = Response(status_code=200, headers=CORS_HEADERS)
            await response(scope, receive, send)
            return

        headers = list(scope.get("headers", []))
        accept = _header(scope, b"accept")
        content_type = _header(scope, b"content-type")
        changed = False

        if EVENT_STREAM not in accept:
            accept = f"{accept}, {EVENT_STREAM}" if accept else f"application/json, {EVENT_STREAM}"
            headers = _replace(headers, b"accept", accept)
            changed = True
        if scope.get("method") == "POST" and not content_type.startswith("application/json"):
            headers = _replace(headers, b"content-type", "application/json")
            changed = True

        if changed:
            scope = dict(scope, headers=headers)
        await self.app(scope, receive, send)


def _replace(headers: list, name: bytes, value: str) -> list:
    kept = [(k, v) for k, v in headers if k.lower() != name]
    kept.append((name, value.encode("latin-1")))
    return kept
