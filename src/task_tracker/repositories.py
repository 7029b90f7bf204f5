from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional, Tuple

from .models import Todo, User
from .settings import Settings, get_settings


def normalize_email(email: str) -> str:
    """Return the canonical form used for email storage and lookups."""
    return email.strip().lower()


# PUBLIC_INTERFACE
class UserRepository(ABC):
    """
    Abstract repository contract for user storage backends.

    Contract:
    - save() is an upsert keyed by user.id
    - lookups return None when nothing matches (no exception)
    - returned entities are detached copies; mutate and save() to persist
    """

    @abstractmethod
    def save(self, user: User) -> None:
        """Create or replace the stored user with the same id."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[User]:
        """Return the user with this id, or None if not found."""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        """Return the user whose normalized email matches, or None."""

    @abstractmethod
    def list(self) -> List[User]:
        """Return all users. No ordering guarantee."""


# PUBLIC_INTERFACE
class TodoRepository(ABC):
    """
    Abstract repository contract for todo storage backends.

    Same upsert and detached-copy rules as UserRepository.
    """

    @abstractmethod
    def save(self, todo: Todo) -> None:
        """Create or replace the stored todo with the same id."""

    @abstractmethod
    def find_by_id(self, todo_id: str) -> Optional[Todo]:
        """Return the todo with this id, or None if not found."""

    @abstractmethod
    def list_by_owner(self, owner_id: Optional[str]) -> List[Todo]:
        """
        Return todos whose owner_id equals ``owner_id`` exactly.
        Passing None returns the todos without an owner.
        """

    @abstractmethod
    def list_all(self) -> List[Todo]:
        """Return all todos. No ordering guarantee."""


class InMemoryUserRepository(UserRepository):
    """
    Thread-safe in-memory user store suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[str, User] = {}

    def save(self, user: User) -> None:
        with self._lock:
            self._items[user.id] = copy.deepcopy(user)

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            item = self._items.get(user_id)
            return None if item is None else copy.deepcopy(item)

    def find_by_email(self, email: str) -> Optional[User]:
        normalized = normalize_email(email)
        with self._lock:
            for user in self._items.values():
                if user.email == normalized:
                    return copy.deepcopy(user)
        return None

    def list(self) -> List[User]:
        with self._lock:
            return [copy.deepcopy(u) for u in self._items.values()]


class InMemoryTodoRepository(TodoRepository):
    """
    Thread-safe in-memory todo store suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[str, Todo] = {}

    def save(self, todo: Todo) -> None:
        with self._lock:
            self._items[todo.id] = copy.deepcopy(todo)

    def find_by_id(self, todo_id: str) -> Optional[Todo]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else copy.deepcopy(item)

    def list_by_owner(self, owner_id: Optional[str]) -> List[Todo]:
        with self._lock:
            return [copy.deepcopy(t) for t in self._items.values() if t.owner_id == owner_id]

    def list_all(self) -> List[Todo]:
        with self._lock:
            return [copy.deepcopy(t) for t in self._items.values()]


# PUBLIC_INTERFACE
def get_repositories(settings: Optional[Settings] = None) -> Tuple[UserRepository, TodoRepository]:
    """
    Factory to return the configured (users, todos) repository pair.
    - memory: InMemoryUserRepository / InMemoryTodoRepository
    - sqlite: SQLiteUserRepository / SQLiteTodoRepository sharing one database file
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteTodoRepository, SQLiteUserRepository

        return (
            SQLiteUserRepository(settings.sqlite_db_path),
            SQLiteTodoRepository(settings.sqlite_db_path),
        )
    return InMemoryUserRepository(), InMemoryTodoRepository()
