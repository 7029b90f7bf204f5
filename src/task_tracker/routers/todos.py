from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..container import Container, get_container
from ..schemas import CompletedTodoOut, TodoCreate, TodoListItem, TodoOut

router = APIRouter(
    prefix="/api/v1/todos",
    tags=["todos"],
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item, optionally owned by an existing user.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Validation error"},
        404: {"description": "Owner user not found"},
    },
)
def create_todo(payload: TodoCreate, container: Container = Depends(get_container)) -> TodoOut:
    """
    Create a new Todo.
    """
    return container.create_todo.execute(payload)


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoListItem],
    summary="List Todos",
    description=(
        "List todos.\n\n"
        "Query parameters:\n"
        "- ownerId: only return todos owned by this user\n\n"
        "No ordering is guaranteed."
    ),
    responses={200: {"description": "List retrieved successfully"}},
)
def list_todos(
    owner_id: Optional[str] = Query(None, alias="ownerId", description="Filter by owner user id"),
    container: Container = Depends(get_container),
) -> List[TodoListItem]:
    """
    List todos, optionally filtered by owner.
    """
    return container.list_todos.execute(owner_id)


# PUBLIC_INTERFACE
@router.post(
    "/{todo_id}/complete",
    response_model=CompletedTodoOut,
    summary="Complete Todo",
    description="Mark a Todo item as completed. A todo can only be completed once.",
    responses={
        200: {"description": "Todo completed"},
        400: {"description": "Todo is already completed"},
        404: {"description": "Todo not found"},
    },
)
def complete_todo(todo_id: str, container: Container = Depends(get_container)) -> CompletedTodoOut:
    """
    Complete a single Todo item by its ID.
    """
    return container.complete_todo.execute(todo_id)
