"""
Todos Backend — Todo SQLAlchemy Model
=====================================

What:  ORM mapping of the `todos` table.
Who:   Used by TodoSQLRepository for every statement and for table creation.

Table Design:
    - id UUID primary key: generated by the repository (uuid4), never by the database
    - title TEXT NOT NULL
    - "order" INTEGER NULL: reserved word, SQLAlchemy quotes it in every statement
    - url TEXT NOT NULL: prefix + id, written once at insert
    - completed BOOLEAN NOT NULL DEFAULT false
"""

import uuid
from typing import Optional

from sqlalchemy import Boolean, Integer, Text, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from todos.database import Base


class TodoRow(Base):
    """
    One persisted todo.

    The generic `Uuid` type maps to native UUID on PostgreSQL and to CHAR(32)
    on SQLite, which the test suite uses in place of PostgreSQL.
    """

    __tablename__ = "todos"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    order: Mapped[Optional[int]] = mapped_column("order", Integer, nullable=True)

    url: Mapped[str] = mapped_column(Text, nullable=False)

    completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=false(),
    )

    def __repr__(self) -> str:
        return f"<TodoRow(id={self.id}, title='{self.title}', completed={self.completed})>"
