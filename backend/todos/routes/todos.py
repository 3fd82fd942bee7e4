"""
Todos Backend — Todo Route Handlers
===================================

What:  CRUD endpoints under /todos.
How:   Parses ids and bodies, calls the repository selected at startup,
       and turns empty repository results into the statuses below.

Route Map:
    POST   /todos        → 201 + Todo
    GET    /todos        → 200 + [Todo]
    GET    /todos/{id}   → 200 + Todo, or 200 with an empty body when missing
    PATCH  /todos/{id}   → 200 + Todo, or 400 when nothing was updated
    DELETE /todos/{id}   → 200, or 400 when nothing was deleted
    DELETE /todos        → 200

A malformed id is always 400. Storage failures surface as DatabaseError and
become 500 in the global handler.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Response

from todos.config import Settings
from todos.dependencies import get_repository, get_settings
from todos.exceptions import ValidationError
from todos.repositories import TodoRepository
from todos.schemas.todo import (
    CreateTodoRequest,
    ErrorResponse,
    Todo,
    UpdateTodoRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["Todos"])


def parse_todo_id(todo_id: str) -> UUID:
    """Path id → UUID, or ValidationError (400) when it is not a UUID."""
    try:
        return UUID(todo_id)
    except ValueError:
        raise ValidationError(
            message=f"'{todo_id}' is not a valid todo id",
            field="todo_id",
        )


@router.post(
    "",
    status_code=201,
    response_model=Todo,
    responses={
        201: {"description": "Todo created", "model": Todo},
        400: {"description": "Invalid body", "model": ErrorResponse},
    },
    summary="Create a todo",
)
async def create_todo(
    body: CreateTodoRequest,
    repository: TodoRepository = Depends(get_repository),
    settings: Settings = Depends(get_settings),
) -> Todo:
    todo = await repository.create(
        title=body.title,
        order=body.order,
        url_prefix=settings.todo_url_prefix,
    )
    logger.info("Created todo %s", todo.id)
    return todo


@router.get(
    "",
    response_model=List[Todo],
    summary="List all todos",
)
async def list_todos(
    repository: TodoRepository = Depends(get_repository),
) -> List[Todo]:
    return await repository.list()


@router.get(
    "/{todo_id}",
    response_model=Todo,
    responses={
        200: {"description": "The todo, or an empty body when it does not exist"},
        400: {"description": "Malformed id", "model": ErrorResponse},
    },
    summary="Get a single todo",
)
async def get_todo(
    todo_id: str,
    repository: TodoRepository = Depends(get_repository),
):
    todo = await repository.get(parse_todo_id(todo_id))
    if todo is None:
        return Response(status_code=200)
    return todo


@router.patch(
    "/{todo_id}",
    response_model=Todo,
    responses={
        400: {"description": "Malformed id, empty patch, or unknown todo", "model": ErrorResponse},
    },
    summary="Partially update a todo",
    description="Only the fields present in the body are changed.",
)
async def update_todo(
    todo_id: str,
    body: UpdateTodoRequest,
    repository: TodoRepository = Depends(get_repository),
) -> Todo:
    parsed_id = parse_todo_id(todo_id)
    todo = await repository.update(
        parsed_id,
        title=body.title,
        order=body.order,
        completed=body.completed,
    )
    if todo is None:
        # Covers both "no such todo" and "no fields supplied"
        raise ValidationError(
            message="No todo was updated",
            context={"todo_id": str(parsed_id)},
        )
    return todo


@router.delete(
    "/{todo_id}",
    responses={
        200: {"description": "Todo deleted"},
        400: {"description": "Malformed id or unknown todo", "model": ErrorResponse},
    },
    summary="Delete a todo",
)
async def delete_todo(
    todo_id: str,
    repository: TodoRepository = Depends(get_repository),
) -> Response:
    parsed_id = parse_todo_id(todo_id)
    if not await repository.delete(parsed_id):
        raise ValidationError(
            message="No todo was deleted",
            context={"todo_id": str(parsed_id)},
        )
    logger.info("Deleted todo %s", parsed_id)
    return Response(status_code=200)


@router.delete(
    "",
    summary="Delete every todo",
)
async def delete_all_todos(
    repository: TodoRepository = Depends(get_repository),
) -> Response:
    await repository.delete_all()
    logger.info("Deleted all todos")
    return Response(status_code=200)
