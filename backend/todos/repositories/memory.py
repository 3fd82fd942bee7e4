"""
Todos Backend — In-Memory Repository
====================================

What:  Keeps todos in a dict owned by the repository instance.
When:  `USE_IN_MEMORY=true`, `python -m todos --in-memory`, and most tests.

Concurrency:
    One asyncio.Lock per instance serializes every operation, so concurrent
    creates never collide and concurrent updates of one todo are linearized.
    Updates build the replacement Todo completely before storing it; a task
    cancelled while waiting for the lock changes nothing.
"""

import asyncio
import uuid
from typing import Dict, List, Optional

from todos.schemas.todo import Todo


class TodoMemoryRepository:
    """Process-local todo store; contents are lost on restart."""

    def __init__(self) -> None:
        self._todos: Dict[uuid.UUID, Todo] = {}
        self._lock = asyncio.Lock()

    async def create(self, title: str, order: Optional[int], url_prefix: str) -> Todo:
        async with self._lock:
            todo_id = uuid.uuid4()
            todo = Todo(
                id=todo_id,
                title=title,
                order=order,
                url=f"{url_prefix}{todo_id}",
                is_completed=False,
            )
            self._todos[todo_id] = todo
            return todo

    async def get(self, id: uuid.UUID) -> Optional[Todo]:
        async with self._lock:
            return self._todos.get(id)

    async def list(self) -> List[Todo]:
        async with self._lock:
            return list(self._todos.values())

    async def update(
        self,
        id: uuid.UUID,
        title: Optional[str] = None,
        order: Optional[int] = None,
        completed: Optional[bool] = None,
    ) -> Optional[Todo]:
        changes = {}
        if title is not None:
            changes["title"] = title
        if order is not None:
            changes["order"] = order
        if completed is not None:
            changes["is_completed"] = completed
        if not changes:
            return None

        async with self._lock:
            todo = self._todos.get(id)
            if todo is None:
                return None
            updated = todo.model_copy(update=changes)
            self._todos[id] = updated
            return updated

    async def delete(self, id: uuid.UUID) -> bool:
        async with self._lock:
            return self._todos.pop(id, None) is not None

    async def delete_all(self) -> None:
        async with self._lock:
            self._todos.clear()
