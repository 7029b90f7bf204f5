from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import Todo, User


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class _Record(BaseModel):
    """
    Base for the data shapes crossing the use-case boundary.

    Python code uses snake_case; JSON uses camelCase (ownerId, isCompleted, ...).
    Both spellings are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class UserCreate(_Record):
    """
    Input for the CreateUser use case. Normalization and validation are done
    by the User entity, not here.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Alice", "email": "alice@example.com"}}
    )

    name: str = Field(..., description="Display name; surrounding whitespace is stripped")
    email: str = Field(..., description="Email address; stripped and lower-cased")


# PUBLIC_INTERFACE
class UserOut(_Record):
    """User record returned by CreateUser and GetUser."""

    id: str = Field(..., description="Unique identifier of the user")
    name: str = Field(..., description="Normalized display name")
    email: str = Field(..., description="Normalized email address")

    @classmethod
    def from_entity(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name, email=user.email)


# PUBLIC_INTERFACE
class TodoCreate(_Record):
    """
    Input for the CreateTodo use case.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy milk",
                "description": "2%",
                "ownerId": "5b0f6c1e-2d0a-4f57-9a8e-0b7c6f3d9e21",
            }
        }
    )

    title: str = Field(..., description="Short title, at least 3 characters after stripping")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    owner_id: Optional[str] = Field(default=None, description="Optional id of the owning user")


class _TodoBase(_Record):
    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Normalized title")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    owner_id: Optional[str] = Field(default=None, description="Id of the owning user, if any")
    is_completed: bool = Field(..., description="Completion status flag")


# PUBLIC_INTERFACE
class TodoOut(_TodoBase):
    """Todo record returned by CreateTodo."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0d3c2a4e-8f5b-4f0a-9c59-3b7e2f6a1d10",
                "title": "Buy milk",
                "description": "2%",
                "ownerId": "5b0f6c1e-2d0a-4f57-9a8e-0b7c6f3d9e21",
                "isCompleted": False,
                "createdAt": "2025-01-25T10:15:30.123456+00:00",
            }
        }
    )

    created_at: str = Field(..., description="Creation timestamp (ISO8601)")

    @classmethod
    def from_entity(cls, todo: Todo) -> "TodoOut":
        return cls(
            id=todo.id,
            title=todo.title,
            description=todo.description,
            owner_id=todo.owner_id,
            is_completed=todo.is_completed,
            created_at=todo.created_at.isoformat(),
        )


# PUBLIC_INTERFACE
class TodoListItem(_TodoBase):
    """Todo record returned by ListTodos."""

    created_at: str = Field(..., description="Creation timestamp (ISO8601)")
    completed_at: Optional[str] = Field(
        default=None, description="Completion timestamp (ISO8601), null while open"
    )

    @classmethod
    def from_entity(cls, todo: Todo) -> "TodoListItem":
        return cls(
            id=todo.id,
            title=todo.title,
            description=todo.description,
            owner_id=todo.owner_id,
            is_completed=todo.is_completed,
            created_at=todo.created_at.isoformat(),
            completed_at=_iso(todo.completed_at),
        )


# PUBLIC_INTERFACE
class CompletedTodoOut(_TodoBase):
    """Todo record returned by CompleteTodo."""

    completed_at: Optional[str] = Field(
        default=None, description="Completion timestamp (ISO8601)"
    )

    @classmethod
    def from_entity(cls, todo: Todo) -> "CompletedTodoOut":
        return cls(
            id=todo.id,
            title=todo.title,
            description=todo.description,
            owner_id=todo.owner_id,
            is_completed=todo.is_completed,
            completed_at=_iso(todo.completed_at),
        )
