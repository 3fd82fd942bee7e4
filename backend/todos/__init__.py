"""
Todos Backend — Application Package Initializer
===============================================

What: Marks the `todos` directory as a Python package.
Who:  Used by uvicorn (`todos.main:app`), the `python -m todos` launcher and pytest.

Architecture Note:
    The backend is split into thin layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Repositories (Storage Layer)     │  ← TodoRepository protocol
    │    ├── TodoMemoryRepository         │     in-process dict + lock
    │    └── TodoSQLRepository            │     async SQLAlchemy
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy row + Pydantic Todo
    └─────────────────────────────────────┘

    Routes never touch the database directly; they only speak to whichever
    repository was selected at startup.
"""

__version__ = "1.0.0"
