"""
Todos Backend — Storage Interface
=================================

What:  The capability set every todo store implements.
Why:   Routes depend on this protocol only, so the in-memory and SQL stores
       are interchangeable and chosen once at startup.
How:   A structural `typing.Protocol`; implementations do not inherit from it.

Contract shared by all implementations:
    - Absence is never an error: get/update return None, delete returns False.
    - update() with no fields returns None even when the todo exists.
    - Storage failures raise DatabaseError (or propagate the backend's own
      error type unchanged); they are never reported as absence.
    - Safe to call from many concurrent asyncio tasks.
"""

from typing import List, Optional, Protocol, runtime_checkable
from uuid import UUID

from todos.schemas.todo import Todo


@runtime_checkable
class TodoRepository(Protocol):
    """Interface for todo storage."""

    async def create(self, title: str, order: Optional[int], url_prefix: str) -> Todo:
        """Store a new todo with a fresh id and url = url_prefix + id."""
        ...

    async def get(self, id: UUID) -> Optional[Todo]:
        ...

    async def list(self) -> List[Todo]:
        """All todos, in no particular order."""
        ...

    async def update(
        self,
        id: UUID,
        title: Optional[str] = None,
        order: Optional[int] = None,
        completed: Optional[bool] = None,
    ) -> Optional[Todo]:
        """Apply only the supplied fields; return the updated todo or None."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Remove one todo; True only if it existed."""
        ...

    async def delete_all(self) -> None:
        ...
