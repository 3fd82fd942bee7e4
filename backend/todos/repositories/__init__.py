# Repositories package init
"""
Todos Backend — Storage Layer
=============================

What:  The TodoRepository protocol and its two implementations.

Repository Inventory:
    - TodoRepository (protocol):  capability set the routes depend on
    - TodoMemoryRepository:       dict guarded by an asyncio.Lock
    - TodoSQLRepository:          async SQLAlchemy over the `todos` table

Which one runs is decided once at startup (see todos.dependencies).
"""

from todos.repositories.base import TodoRepository
from todos.repositories.memory import TodoMemoryRepository
from todos.repositories.sql import TodoSQLRepository

__all__ = ["TodoRepository", "TodoMemoryRepository", "TodoSQLRepository"]
