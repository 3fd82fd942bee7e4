"""
Todos Backend — Request Logging Middleware
==========================================

What:  One access-log line per HTTP request on the `todos.access` logger.
How:   Times the downstream handler, then logs the matched route template
       (e.g. `PATCH /todos/{todo_id}`), the todo id it addressed, status,
       duration and request id.

Level by status:
    5xx → ERROR, 4xx → WARNING, everything else → INFO

Request bodies are never logged. /health is skipped.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from todos.middleware.request_id import request_id_var

logger = logging.getLogger("todos.access")

SKIPPED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def route_of(request: Request) -> str:
    """
    Route template the router matched, or the raw path when nothing matched.

    Routing writes `route` into the shared ASGI scope, so it is only
    available after the downstream call returns.
    """
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def todo_id_of(request: Request) -> Optional[str]:
    return request.scope.get("path_params", {}).get("todo_id")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs each todo request once its response is ready."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        route = route_of(request)
        todo_id = todo_id_of(request)
        rid = request_id_var.get("")

        logger.log(
            level_for_status(response.status_code),
            "[%s] %s %s%s -> %d (%.1fms)",
            rid,
            request.method,
            route,
            f" todo={todo_id}" if todo_id else "",
            response.status_code,
            elapsed_ms,
            extra={
                "request_id": rid,
                "route": route,
                "todo_id": todo_id,
                "status": response.status_code,
            },
        )
        return response
