"""
Request context middleware.

Binds a request id into structlog's context variables for the lifetime of a
request so every log line emitted while handling it can be correlated, and
echoes the id back in the ``X-Request-ID`` response header.

Written as a plain ASGI middleware rather than ``BaseHTTPMiddleware`` so that
streaming responses and client disconnects pass through untouched.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "x-request-id"


class RequestContextMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = None
        for name, value in scope.get("headers", []):
            if name == REQUEST_ID_HEADER.encode("latin-1"):
                request_id = value.decode("latin-1")[:64]
                break
        request_id = request_id or uuid.uuid4().hex

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.append("X-Request-ID", request_id)
            await send(message)

        with structlog.contextvars.bound_contextvars(
            request_id=request_id, method=scope.get("method"), path=scope.get("path")
        ):
            await self.app(scope, receive, send_with_request_id)
