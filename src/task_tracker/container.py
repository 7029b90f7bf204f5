from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from .ids import new_id
from .models import IdFactory
from .repositories import TodoRepository, UserRepository, get_repositories
from .settings import Settings, get_settings
from .use_cases import CompleteTodo, CreateTodo, CreateUser, GetUser, ListTodos


# PUBLIC_INTERFACE
@dataclass(frozen=True)
class Container:
    """
    Wired application: the five use cases plus the repositories behind them.
    The repositories are exposed for health reporting and tests.
    """

    backend: str
    user_repository: UserRepository
    todo_repository: TodoRepository
    create_user: CreateUser
    get_user: GetUser
    create_todo: CreateTodo
    list_todos: ListTodos
    complete_todo: CompleteTodo


# PUBLIC_INTERFACE
def build_container(
    settings: Optional[Settings] = None,
    id_factory: IdFactory = new_id,
) -> Container:
    """Build a Container for the configured backend using ``id_factory`` for new entities."""
    settings = settings or get_settings()
    users, todos = get_repositories(settings)
    return Container(
        backend=settings.persistence_backend,
        user_repository=users,
        todo_repository=todos,
        create_user=CreateUser(users, id_factory),
        get_user=GetUser(users),
        create_todo=CreateTodo(todos, id_factory, users),
        list_todos=ListTodos(todos),
        complete_todo=CompleteTodo(todos),
    )


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_container() -> Container:
    """Return the process-wide Container. Used as the FastAPI dependency."""
    return build_container()
