from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Optional

IdFactory = Callable[[], str]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainError(Exception):
    """
    Base class for errors raised by the entities themselves.

    Domain errors never cross the use-case boundary: use cases translate them
    into the application error taxonomy in ``errors.py``.
    """


class InvariantViolationError(DomainError):
    """Raised when an entity would be constructed in an invalid state."""


class TodoAlreadyCompletedError(DomainError):
    """Raised by Todo.complete() when the todo is already in the completed state."""


# PUBLIC_INTERFACE
class User:
    """
    A user of the task tracker.

    Fields:
    - id: Opaque identifier, assigned once by the caller-supplied id factory
    - name: Display name, stripped; must not be empty
    - email: Stripped and lower-cased; must contain '@'
    """

    def __init__(self, id: str, name: str, email: str) -> None:
        self._id = id
        self.name = name.strip()
        self.email = email.strip().lower()

        if not self.name:
            raise InvariantViolationError("Name cannot be empty")
        if "@" not in self.email:
            raise InvariantViolationError("Email appears invalid")

    @property
    def id(self) -> str:
        return self._id

    @classmethod
    def create(cls, name: str, email: str, id_factory: IdFactory) -> "User":
        """Build a new User, delegating identity to ``id_factory``."""
        return cls(id_factory(), name, email)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return (self.id, self.name, self.email) == (other.id, other.name, other.email)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, name={self.name!r}, email={self.email!r})"


# PUBLIC_INTERFACE
class Todo:
    """
    A todo item, optionally owned by a user.

    Fields:
    - id: Opaque identifier, immutable
    - title: Stripped; at least 3 characters
    - description: Optional free text
    - owner_id: Optional id of the owning User (not checked by the entity)
    - is_completed: Completion flag, starts False
    - created_at: UTC creation instant, immutable
    - completed_at: UTC completion instant, only set by complete()

    State machine: open -> completed via complete(); completed is terminal.
    """

    MIN_TITLE_LENGTH = 3

    def __init__(
        self,
        id: str,
        title: str,
        description: Optional[str] = None,
        owner_id: Optional[str] = None,
        is_completed: bool = False,
        created_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        self._id = id
        self.title = title.strip()
        self.description = description
        self.owner_id = owner_id
        self.is_completed = is_completed
        self._created_at = created_at if created_at is not None else _utcnow()
        self.completed_at = completed_at

        if len(self.title) < self.MIN_TITLE_LENGTH:
            raise InvariantViolationError(
                f"Title must be at least {self.MIN_TITLE_LENGTH} characters"
            )

    @property
    def id(self) -> str:
        return self._id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def complete(self, now: Optional[datetime] = None) -> None:
        """
        Mark the todo as completed and stamp completed_at.

        Raises:
            TodoAlreadyCompletedError: If the todo was completed before.
        """
        if self.is_completed:
            raise TodoAlreadyCompletedError("Todo is already completed")
        self.is_completed = True
        self.completed_at = now if now is not None else _utcnow()

    def assign_to(self, owner_id: Optional[str]) -> None:
        """Reassign the owner. Existence of the user is the caller's concern."""
        self.owner_id = owner_id

    @classmethod
    def create(
        cls,
        title: str,
        id_factory: IdFactory,
        description: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> "Todo":
        """Build a new open Todo, delegating identity to ``id_factory``."""
        return cls(id_factory(), title, description=description, owner_id=owner_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Todo):
            return NotImplemented
        return (
            self.id == other.id
            and self.title == other.title
            and self.description == other.description
            and self.owner_id == other.owner_id
            and self.is_completed == other.is_completed
            and self.created_at == other.created_at
            and self.completed_at == other.completed_at
        )

    def __repr__(self) -> str:
        return (
            f"Todo(id={self.id!r}, title={self.title!r}, owner_id={self.owner_id!r}, "
            f"is_completed={self.is_completed!r})"
        )
