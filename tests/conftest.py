"""Shared pytest fixtures for the test suite."""

import itertools
import os
from dataclasses import replace

import pytest

# Ensure we default to memory backend for tests to avoid filesystem dependencies
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from task_tracker.repositories import InMemoryTodoRepository, InMemoryUserRepository  # noqa: E402
from task_tracker.settings import Settings, get_settings  # noqa: E402


@pytest.fixture
def memory_settings() -> Settings:
    return replace(get_settings(), persistence_backend="memory")


@pytest.fixture
def sqlite_settings(tmp_path) -> Settings:
    return replace(
        get_settings(),
        persistence_backend="sqlite",
        sqlite_db_path=str(tmp_path / "data" / "tasks.db"),
    )


@pytest.fixture
def id_factory():
    """Deterministic id factory: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def todo_repository() -> InMemoryTodoRepository:
    return InMemoryTodoRepository()
