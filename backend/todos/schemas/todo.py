"""
Todos Backend — Pydantic Entity and Request/Response Schemas
============================================================

What:  The `Todo` entity plus the request bodies and envelopes the API exchanges.
Why:   Both repositories return `Todo`, so routes serialize the same type no
       matter which backend is running.
How:   FastAPI validates request bodies against these models and serializes
       responses by alias (`isCompleted` on the wire).
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Entity
# ══════════════════════════════════════════════════════════════════════════


class Todo(BaseModel):
    """
    A single todo item.

    Invariants:
        - id and url are fixed at creation; url == url_prefix + str(id)
        - a Todo is always complete; repositories never hand out partial records
    """
    id: uuid.UUID = Field(description="Unique todo identifier (UUID4)")
    title: str = Field(description="What needs doing")
    order: Optional[int] = Field(default=None, description="Client-defined position, not enforced")
    url: str = Field(description="Canonical URL of this todo")
    is_completed: bool = Field(
        default=False,
        alias="isCompleted",
        description="Whether the todo has been done",
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ══════════════════════════════════════════════════════════════════════════
# Request Models: what the client sends
# ══════════════════════════════════════════════════════════════════════════


class CreateTodoRequest(BaseModel):
    """Body of POST /todos."""
    title: str = Field(description="Todo title (must not be blank)")
    order: Optional[int] = Field(default=None, description="Optional position")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Rejects empty or whitespace-only titles."""
        if not v.strip():
            raise ValueError("title must not be empty")
        return v


class UpdateTodoRequest(BaseModel):
    """
    Body of PATCH /todos/{id}.

    Every field is optional; omitted (or null) fields are left unchanged.
    A body with no fields at all is answered with 400.
    """
    title: Optional[str] = Field(default=None, description="New title")
    order: Optional[int] = Field(default=None, description="New position")
    completed: Optional[bool] = Field(default=None, description="New completion state")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("title must not be empty")
        return v


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "No todo was updated",
            "details": {"todo_id": "..."},
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    backend: str = Field(description="Active storage backend: memory, sql")
    database: str = Field(description="Database connectivity: connected, disconnected, not_used")
    uptime_seconds: float = Field(description="Seconds since service started")
