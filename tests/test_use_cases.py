"""Tests for the application use cases, wired against in-memory repositories."""

from datetime import datetime

import pytest

from task_tracker.errors import ErrorKind, NotFoundError, ValidationError
from task_tracker.models import Todo, User
from task_tracker.repositories import UserRepository
from task_tracker.schemas import TodoCreate, UserCreate
from task_tracker.use_cases import CompleteTodo, CreateTodo, CreateUser, GetUser, ListTodos


class RecordingUserRepository(UserRepository):
    """Dict-backed repository that records every save()."""

    def __init__(self):
        self.saved = []
        self.by_id = {}

    def save(self, user):
        self.saved.append(user)
        self.by_id[user.id] = user

    def find_by_id(self, user_id):
        return self.by_id.get(user_id)

    def find_by_email(self, email):
        normalized = email.strip().lower()
        return next((u for u in self.by_id.values() if u.email == normalized), None)

    def list(self):
        return [*self.by_id.values()]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def recording_users() -> RecordingUserRepository:
    return RecordingUserRepository()


@pytest.fixture
def create_user(user_repository, id_factory) -> CreateUser:
    return CreateUser(user_repository, id_factory)


@pytest.fixture
def create_todo(todo_repository, id_factory, user_repository) -> CreateTodo:
    return CreateTodo(todo_repository, id_factory, user_repository)


@pytest.fixture
def owner(user_repository) -> User:
    user = User("owner-1", "Olive", "olive@example.com")
    user_repository.save(user)
    return user


# =============================================================================
# CreateUser
# =============================================================================


class TestCreateUser:
    def test_creates_user_with_normalized_fields(self, recording_users):
        use_case = CreateUser(recording_users, lambda: "fixed-id-1")

        out = use_case.execute(UserCreate(name="  Alice ", email=" Alice@EXAMPLE.com "))

        assert out.model_dump() == {"id": "fixed-id-1", "name": "Alice", "email": "alice@example.com"}
        assert len(recording_users.saved) == 1
        saved = recording_users.saved[0]
        assert isinstance(saved, User)
        assert saved.id == "fixed-id-1"
        assert saved.email == "alice@example.com"

    def test_duplicate_email_rejected(self, recording_users):
        recording_users.by_id["u-1"] = User("u-1", "Alice", "alice@example.com")
        use_case = CreateUser(recording_users, lambda: "fixed-id-1")

        with pytest.raises(ValidationError, match="Email already in use"):
            use_case.execute(UserCreate(name="Other Alice", email="  ALICE@example.com"))
        assert recording_users.saved == []

    def test_second_call_with_same_email_fails(self, create_user, user_repository):
        create_user.execute(UserCreate(name="Alice", email="alice@example.com"))
        with pytest.raises(ValidationError, match="Email already in use"):
            create_user.execute(UserCreate(name="Alice", email="alice@example.com"))
        assert len(user_repository.list()) == 1

    def test_invalid_email_surfaces_entity_message(self, recording_users):
        use_case = CreateUser(recording_users, lambda: "fixed-id-1")
        with pytest.raises(ValidationError) as exc_info:
            use_case.execute(UserCreate(name="Bob", email="invalid-email"))
        assert exc_info.value.message == "Email appears invalid"
        assert exc_info.value.status_code == 400
        assert recording_users.saved == []

    def test_empty_name_surfaces_entity_message(self, recording_users):
        use_case = CreateUser(recording_users, lambda: "fixed-id-1")
        with pytest.raises(ValidationError, match="Name cannot be empty"):
            use_case.execute(UserCreate(name="   ", email="bob@example.com"))

    def test_uses_injected_id_factory(self, user_repository):
        ids = iter(range(42, 100))
        use_case = CreateUser(user_repository, lambda: f"id-{next(ids)}")
        out = use_case.execute(UserCreate(name="Charlie", email="charlie@example.com"))
        assert out.id == "id-42"


# =============================================================================
# GetUser
# =============================================================================


class TestGetUser:
    def test_returns_user_record(self, create_user, user_repository):
        created = create_user.execute(UserCreate(name="Alice", email="alice@example.com"))
        fetched = GetUser(user_repository).execute(created.id)
        assert fetched == created

    def test_missing_user(self, user_repository):
        with pytest.raises(NotFoundError, match="User not found") as exc_info:
            GetUser(user_repository).execute("nope")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.status_code == 404


# =============================================================================
# CreateTodo
# =============================================================================


class TestCreateTodo:
    def test_creates_owned_todo(self, create_todo, owner, todo_repository):
        out = create_todo.execute(TodoCreate(title="Buy milk", description="2%", owner_id=owner.id))

        assert out.title == "Buy milk"
        assert out.description == "2%"
        assert out.owner_id == owner.id
        assert out.is_completed is False
        datetime.fromisoformat(out.created_at)
        assert todo_repository.find_by_id(out.id) is not None

    def test_creates_unowned_todo(self, create_todo):
        out = create_todo.execute(TodoCreate(title="Read book"))
        assert out.owner_id is None
        assert out.description is None

    def test_empty_owner_id_treated_as_absent(self, create_todo):
        out = create_todo.execute(TodoCreate(title="Read book", owner_id=""))
        assert out.owner_id is None

    def test_unknown_owner_rejected_before_title_check(self, create_todo, todo_repository):
        with pytest.raises(NotFoundError, match="Owner user not found"):
            create_todo.execute(TodoCreate(title="x", owner_id="ghost"))
        assert todo_repository.list_all() == []

    def test_short_title_rejected(self, create_todo, todo_repository):
        with pytest.raises(ValidationError, match="Title must be at least 3 characters"):
            create_todo.execute(TodoCreate(title="  ab "))
        assert todo_repository.list_all() == []

    def test_title_is_trimmed(self, create_todo):
        assert create_todo.execute(TodoCreate(title="  Walk dog  ")).title == "Walk dog"


# =============================================================================
# ListTodos
# =============================================================================


class TestListTodos:
    def test_lists_all_or_by_owner(self, create_todo, owner, todo_repository):
        mine = create_todo.execute(TodoCreate(title="Mine", owner_id=owner.id))
        create_todo.execute(TodoCreate(title="Nobody's"))

        use_case = ListTodos(todo_repository)
        assert {t.id for t in use_case.execute()} == {mine.id, "id-2"}
        assert [t.id for t in use_case.execute(owner.id)] == [mine.id]
        assert use_case.execute("someone-else") == []

    def test_items_render_timestamps(self, create_todo, todo_repository):
        created = create_todo.execute(TodoCreate(title="Open one"))
        done = create_todo.execute(TodoCreate(title="Done one"))
        CompleteTodo(todo_repository).execute(done.id)

        items = {t.id: t for t in ListTodos(todo_repository).execute()}
        assert items[created.id].completed_at is None
        assert items[created.id].created_at == created.created_at
        assert items[done.id].is_completed is True
        datetime.fromisoformat(items[done.id].completed_at)

    def test_empty_repository(self, todo_repository):
        assert ListTodos(todo_repository).execute() == []


# =============================================================================
# CompleteTodo
# =============================================================================


class TestCompleteTodo:
    def test_completes_once(self, create_todo, todo_repository):
        created = create_todo.execute(TodoCreate(title="Ship it"))
        use_case = CompleteTodo(todo_repository)

        out = use_case.execute(created.id)
        assert out.is_completed is True
        assert out.completed_at is not None
        datetime.fromisoformat(out.completed_at)

        with pytest.raises(ValidationError, match="Todo is already completed"):
            use_case.execute(created.id)

    def test_persists_completion(self, todo_repository):
        todo_repository.save(Todo("t-1", "Persist me"))
        CompleteTodo(todo_repository).execute("t-1")
        stored = todo_repository.find_by_id("t-1")
        assert stored.is_completed is True
        assert stored.completed_at is not None

    def test_missing_todo(self, todo_repository):
        with pytest.raises(NotFoundError, match="Todo not found"):
            CompleteTodo(todo_repository).execute("nonexistent")

    def test_repository_failure_propagates(self):
        class BrokenTodoRepository:
            def find_by_id(self, todo_id):
                raise RuntimeError("disk on fire")

        with pytest.raises(RuntimeError, match="disk on fire"):
            CompleteTodo(BrokenTodoRepository()).execute("t-1")
