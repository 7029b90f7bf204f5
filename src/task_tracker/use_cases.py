"""
Application use cases.

Each use case is a small class wired with the repository ports it needs and
exposing a single ``execute`` method. Entity-level failures are translated
into the application error taxonomy with their message preserved; anything
else raised by a repository propagates untouched.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from .errors import NotFoundError, ValidationError
from .models import DomainError, Todo, User
from .repositories import normalize_email
from .schemas import CompletedTodoOut, TodoCreate, TodoListItem, TodoOut, UserCreate, UserOut

if TYPE_CHECKING:
    from .models import IdFactory
    from .repositories import TodoRepository, UserRepository

logger = structlog.get_logger(__name__)


# PUBLIC_INTERFACE
class CreateUser:
    """Register a new user with a unique, normalized email."""

    def __init__(self, user_repository: UserRepository, id_factory: IdFactory) -> None:
        self._users = user_repository
        self._id_factory = id_factory

    def execute(self, data: UserCreate) -> UserOut:
        """
        Raises:
            ValidationError: Email already in use, or the User entity rejected the input.
        """
        email = normalize_email(data.email)
        if self._users.find_by_email(email) is not None:
            logger.info("user_rejected", reason="duplicate_email")
            raise ValidationError("Email already in use")

        try:
            user = User.create(data.name, data.email, self._id_factory)
        except DomainError as exc:
            raise ValidationError(str(exc)) from exc

        self._users.save(user)
        logger.info("user_created", user_id=user.id)
        return UserOut.from_entity(user)


# PUBLIC_INTERFACE
class GetUser:
    """Fetch a single user by id."""

    def __init__(self, user_repository: UserRepository) -> None:
        self._users = user_repository

    def execute(self, user_id: str) -> UserOut:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return UserOut.from_entity(user)


# PUBLIC_INTERFACE
class CreateTodo:
    """
    Create a todo, optionally owned by an existing user.

    The owner reference is only checked here, at creation time.
    """

    def __init__(
        self,
        todo_repository: TodoRepository,
        id_factory: IdFactory,
        user_repository: UserRepository,
    ) -> None:
        self._todos = todo_repository
        self._id_factory = id_factory
        self._users = user_repository

    def execute(self, data: TodoCreate) -> TodoOut:
        """
        Raises:
            NotFoundError: owner_id given but no such user exists.
            ValidationError: The Todo entity rejected the input (e.g. short title).
        """
        owner_id = data.owner_id or None
        if owner_id is not None and self._users.find_by_id(owner_id) is None:
            raise NotFoundError("Owner user not found")

        try:
            todo = Todo.create(
                data.title,
                self._id_factory,
                description=data.description,
                owner_id=owner_id,
            )
        except DomainError as exc:
            raise ValidationError(str(exc)) from exc

        self._todos.save(todo)
        logger.info("todo_created", todo_id=todo.id, owner_id=owner_id)
        return TodoOut.from_entity(todo)


# PUBLIC_INTERFACE
class ListTodos:
    """List all todos, or only those of one owner."""

    def __init__(self, todo_repository: TodoRepository) -> None:
        self._todos = todo_repository

    def execute(self, owner_id: Optional[str] = None) -> List[TodoListItem]:
        if owner_id:
            todos = self._todos.list_by_owner(owner_id)
        else:
            todos = self._todos.list_all()
        return [TodoListItem.from_entity(t) for t in todos]


# PUBLIC_INTERFACE
class CompleteTodo:
    """Mark a todo as completed. Completion happens at most once."""

    def __init__(self, todo_repository: TodoRepository) -> None:
        self._todos = todo_repository

    def execute(self, todo_id: str) -> CompletedTodoOut:
        """
        Raises:
            NotFoundError: No todo with this id.
            ValidationError: The todo is already completed.
        """
        todo = self._todos.find_by_id(todo_id)
        if todo is None:
            raise NotFoundError("Todo not found")

        try:
            todo.complete()
        except DomainError as exc:
            raise ValidationError(str(exc)) from exc

        self._todos.save(todo)
        logger.info("todo_completed", todo_id=todo.id)
        return CompletedTodoOut.from_entity(todo)
