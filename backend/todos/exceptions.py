"""
Todos Backend — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the error scenarios the API can hit.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by routes and the relational repository; caught by global handlers.

Exception Hierarchy:
    TodosError (base)
    ├── ValidationError   → 400 Bad Request (client can fix)
    └── DatabaseError     → 500 Internal Server Error

Not-found is deliberately absent: repositories report a missing todo as
`None` / `False`, and the routes decide what status that becomes.
"""

from typing import Any, Dict, Optional


class TodosError(Exception):
    """
    Base exception for all Todos application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(TodosError):
    """
    Raised when client input fails validation.

    When:    Malformed todo id in the path, missing or empty title, bad body types.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "'abc' is not a valid todo id",
            "details": {"field": "todo_id"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(TodosError):
    """
    Raised when the relational backend fails.

    What:    A query, insert, update or delete failed in the database driver.
    When:    Connection lost, table missing, constraint violation, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The operation name
    and original exception type travel in `context` and are logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
