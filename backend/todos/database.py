"""
Todos Backend — Database Engine Management
==========================================

What:  Async SQLAlchemy engine construction, declarative base and lifecycle helpers.
Why:   Keeps connection and pooling setup out of the repository; the relational
       repository only receives an already-configured engine.
Who:   Used by the application lifespan (build/dispose) and the health route.
When:  The engine is built once at startup, and only when the relational
       backend is selected.

Connection Pooling Strategy:
    pool_size / max_overflow come from settings for PostgreSQL.
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
    SQLite URLs skip pool sizing because SQLAlchemy picks its own pool class there.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from todos.config import Settings


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    The shared metadata is what `TodoSQLRepository.create_table()` creates
    from, so every mapped table must inherit from this class.
    """
    pass


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(settings: Settings) -> AsyncEngine:
    """
    What:  Creates the async engine for the configured database URL.
    When:  Called from the application lifespan when the in-memory backend is off.

    Echoes SQL when log_level is DEBUG.
    """
    options = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_recycle=3600,
        )
    return create_async_engine(settings.database_url, **options)


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def check_connection(engine: AsyncEngine) -> None:
    """
    Runs `SELECT 1` against the engine.

    Raises whatever the driver raises when the database is unreachable;
    the health route turns that into a "disconnected" status.
    """
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Gracefully closes all connections in the pool.
    When:  Called during application shutdown (lifespan handler).
    """
    await engine.dispose()
