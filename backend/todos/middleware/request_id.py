"""
Todos Backend — Request ID Middleware
=====================================

What:  Tags every request with a short correlation id and echoes it back.
How:   Takes X-Request-ID from the client when present, otherwise generates
       one; stores it in a ContextVar for loggers and error handlers, and
       sets the X-Request-ID response header.
When:  Outermost user middleware, so everything downstream can read the id.

The ContextVar is left set after the response. The catch-all exception
handler runs in Starlette's ServerErrorMiddleware, outside this one, and
still reads the id from it; that handler sets the header itself.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns X-Request-ID to each request and response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough to correlate log lines
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
