"""
Todos Backend — Relational Repository
=====================================

What:  Stores todos in the `todos` table through async SQLAlchemy.
Who:   Selected at startup when the in-memory backend is off.
How:   Receives a ready AsyncEngine (pooling and URL are not its business)
       and opens one short transaction per operation.

Statement Shapes:
    create      INSERT (the returned Todo is built from the values sent)
    get / list  SELECT id, title, "order", url, completed
    update      UPDATE ... SET <only supplied columns> WHERE id = :id, then SELECT
    delete      DELETE ... WHERE id = :id, existence judged from rowcount
    delete_all  DELETE FROM todos

    Every value is a bound parameter. SET clauses are assembled from
    (column, value) pairs, so adding a field adds one pair, not 2^n statements.

Consistency:
    No application-level locking. Concurrent updates of one row are
    last-write-wins. Each operation is one transaction; update() runs its
    UPDATE and the follow-up SELECT inside the same one, and the row lock the
    UPDATE takes on PostgreSQL holds off a concurrent DELETE until commit.

Error Handling:
    Any SQLAlchemyError is logged and re-raised as DatabaseError. Absence is
    never an error here.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from todos.database import Base
from todos.exceptions import DatabaseError
from todos.models.todo import TodoRow
from todos.schemas.todo import Todo

logger = logging.getLogger(__name__)


def build_update_values(
    title: Optional[str] = None,
    order: Optional[int] = None,
    completed: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Collect the SET clause for a partial update.

    Returns a mapping of column key → new value containing only the supplied
    fields. An empty mapping means there is nothing to update.
    """
    pairs: List[Tuple[str, Any]] = [
        ("title", title),
        ("order", order),
        ("completed", completed),
    ]
    return {column: value for column, value in pairs if value is not None}


def _to_todo(row: TodoRow) -> Todo:
    return Todo(
        id=row.id,
        title=row.title,
        order=row.order,
        url=row.url,
        is_completed=row.completed,
    )


class TodoSQLRepository:
    """
    SQLAlchemy-backed todo store. Works with any async URL; production uses
    postgresql+asyncpg, the test suite uses sqlite+aiosqlite.
    """

    def __init__(self, engine: AsyncEngine, log: Optional[logging.Logger] = None):
        self.engine = engine
        self.logger = log or logger
        # expire_on_commit=False: rows are converted to Todo after the commit
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    # ── Setup ─────────────────────────────────────────────────────────────
    async def create_table(self) -> None:
        """
        CREATE TABLE IF NOT EXISTS for `todos`.

        Idempotent; run once at startup, not per operation.
        """
        async with self._errors("create_table"):
            async with self.engine.begin() as conn:
                await conn.run_sync(
                    Base.metadata.create_all,
                    tables=[TodoRow.__table__],
                    checkfirst=True,
                )
        self.logger.info("Table '%s' is ready", TodoRow.__tablename__)

    # ── Operations ────────────────────────────────────────────────────────
    async def create(self, title: str, order: Optional[int], url_prefix: str) -> Todo:
        todo_id = uuid.uuid4()
        url = f"{url_prefix}{todo_id}"
        async with self._session("create") as session:
            await session.execute(
                insert(TodoRow).values(
                    id=todo_id,
                    title=title,
                    order=order,
                    url=url,
                    completed=False,
                )
            )
        self.logger.debug("Created todo %s", todo_id)
        return Todo(id=todo_id, title=title, order=order, url=url, is_completed=False)

    async def get(self, id: uuid.UUID) -> Optional[Todo]:
        async with self._session("get") as session:
            result = await session.execute(select(TodoRow).where(TodoRow.id == id))
            row = result.scalar_one_or_none()
        return _to_todo(row) if row is not None else None

    async def list(self) -> List[Todo]:
        async with self._session("list") as session:
            result = await session.execute(select(TodoRow))
            rows = result.scalars().all()
        return [_to_todo(row) for row in rows]

    async def update(
        self,
        id: uuid.UUID,
        title: Optional[str] = None,
        order: Optional[int] = None,
        completed: Optional[bool] = None,
    ) -> Optional[Todo]:
        values = build_update_values(title=title, order=order, completed=completed)
        if not values:
            return None

        async with self._session("update") as session:
            result = await session.execute(
                update(TodoRow)
                .where(TodoRow.id == id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            # UPDATE does not hand back the full row; read it again
            reread = await session.execute(select(TodoRow).where(TodoRow.id == id))
            row = reread.scalar_one_or_none()

        self.logger.debug("Updated todo %s: %s", id, sorted(values))
        return _to_todo(row) if row is not None else None

    async def delete(self, id: uuid.UUID) -> bool:
        async with self._session("delete") as session:
            result = await session.execute(
                delete(TodoRow)
                .where(TodoRow.id == id)
                .execution_options(synchronize_session=False)
            )
            deleted = result.rowcount > 0
        if deleted:
            self.logger.debug("Deleted todo %s", id)
        return deleted

    async def delete_all(self) -> None:
        async with self._session("delete_all") as session:
            await session.execute(
                delete(TodoRow).execution_options(synchronize_session=False)
            )
        self.logger.debug("Deleted all todos")

    # ── Helpers ───────────────────────────────────────────────────────────
    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        """One session and one transaction; commits on success, rolls back on error."""
        async with self._errors(operation):
            async with self._session_factory.begin() as session:
                yield session

    @asynccontextmanager
    async def _errors(self, operation: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.logger.error(
                "Database error during %s: %s", operation, str(e), exc_info=True
            )
            raise DatabaseError(
                context={"operation": operation, "original_error": type(e).__name__},
            ) from e
