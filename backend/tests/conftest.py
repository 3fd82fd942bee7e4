"""
Todos Backend — Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── memory_repository: fresh TodoMemoryRepository
    ├── sql_engine:        async SQLite engine on a temp file (stands in for PostgreSQL)
    ├── sql_repository:    TodoSQLRepository with its table created
    ├── repository:        parametrized over both backends ("memory", "sql")
    ├── test_settings:     Settings for the in-memory backend
    └── test_client:       HTTPX AsyncClient talking to an app built on `repository`
"""

import os

# Must happen before any todos import so the settings singleton picks them up
os.environ["USE_IN_MEMORY"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from todos.config import Settings
from todos.main import create_app
from todos.repositories import TodoMemoryRepository, TodoSQLRepository


URL_PREFIX = "http://localhost:8080/todos/"


def make_sqlite_engine(path):
    """
    Async SQLite engine on a file, limited to one pooled connection.

    SQLite allows a single writer and answers "database is locked" to
    competing transactions instead of queueing them; one connection makes
    concurrent tasks wait in the pool instead.
    """
    return create_async_engine(
        f"sqlite+aiosqlite:///{path}",
        poolclass=AsyncAdaptedQueuePool,
        pool_size=1,
        max_overflow=0,
    )


@pytest.fixture
def url_prefix():
    return URL_PREFIX


@pytest.fixture
def memory_repository():
    return TodoMemoryRepository()


@pytest_asyncio.fixture
async def sql_engine(tmp_path):
    """Async SQLite engine backed by a file in tmp_path."""
    engine = make_sqlite_engine(tmp_path / "todos.db")
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def sql_repository(sql_engine):
    repository = TodoSQLRepository(sql_engine)
    await repository.create_table()
    return repository


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repository(request, tmp_path):
    """
    Runs the requesting test once per backend.

    Both backends must satisfy the same contract, so contract tests take this
    fixture instead of a concrete repository.
    """
    if request.param == "memory":
        yield TodoMemoryRepository()
        return

    engine = make_sqlite_engine(tmp_path / "todos.db")
    sql = TodoSQLRepository(engine)
    await sql.create_table()
    yield sql
    await engine.dispose()


@pytest.fixture
def test_settings():
    return Settings(use_in_memory=True, log_level="WARNING", todo_url_prefix=URL_PREFIX)


@pytest_asyncio.fixture
async def test_client(test_settings, repository):
    """
    HTTPX AsyncClient wired to a fresh app.

    ASGITransport does not run the lifespan, so the repository is injected
    through create_app instead of being built at startup.
    """
    app = create_app(settings=test_settings, repository=repository)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
