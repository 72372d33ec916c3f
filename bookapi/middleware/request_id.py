"""
Book API — Request ID Middleware
================================

What:  Assigns a correlation ID to each incoming request and returns it in
       the X-Request-ID response header.
How:   Reuses a client-supplied X-Request-ID or generates a short UUID, then
       stores it in a ContextVar (for loggers and exception handlers) and in
       request.state (for route handlers).
When:  First middleware in the chain.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on the same thread each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that assigns a unique ID to each request for tracing.

    Behavior:
        1. Use the client's X-Request-ID header if present
        2. Otherwise generate the first 8 characters of a UUID4
        3. Store in ContextVar and request.state
        4. Echo it back in the response headers
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response


def current_request_id(request: Request) -> str:
    """
    Request ID for code running outside the middleware's context.

    Handlers for bare Exception run in Starlette's ServerErrorMiddleware,
    outside RequestIDMiddleware, where request_id_var is unset. request.state
    is backed by the shared ASGI scope, so the ID stored there is still visible.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")
