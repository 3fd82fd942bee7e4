"""
Dependency wiring for the FastAPI app.

The repository lives on `app.state` so that each application instance (and
each test) owns its own store.
"""

import logging
from typing import Optional, Tuple

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine

from todos.config import Settings
from todos.database import build_engine
from todos.repositories import TodoMemoryRepository, TodoRepository, TodoSQLRepository

logger = logging.getLogger(__name__)


async def build_repository(settings: Settings) -> Tuple[TodoRepository, Optional[AsyncEngine]]:
    """
    Select and prepare the storage backend described by settings.

    Returns the repository and, for the SQL backend, the engine the caller
    must dispose on shutdown.
    """
    if settings.use_in_memory:
        logger.info("Using in-memory todo storage")
        return TodoMemoryRepository(), None

    engine = build_engine(settings)
    repository = TodoSQLRepository(engine, log=logging.getLogger("todos.sql"))
    try:
        await repository.create_table()
    except Exception:
        await engine.dispose()
        raise
    logger.info("Using SQL todo storage at %s", engine.url.render_as_string(hide_password=True))
    return repository, engine


def get_repository(request: Request) -> TodoRepository:
    """FastAPI dependency returning the repository selected at startup."""
    return request.app.state.repository


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was created with."""
    return request.app.state.settings
