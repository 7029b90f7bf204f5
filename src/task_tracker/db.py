from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .models import Todo, User
from .repositories import TodoRepository, UserRepository, normalize_email


@dataclass(frozen=True)
class _UserCols:
    table: str = "users"
    id: str = "id"
    name: str = "name"
    email: str = "email"


@dataclass(frozen=True)
class _TodoCols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    owner_id: str = "owner_id"
    is_completed: str = "is_completed"
    created_at: str = "created_at"
    completed_at: str = "completed_at"


_USERS = _UserCols()
_TODOS = _TodoCols()


def _parse_dt(s: Optional[str]) -> Optional[datetime]:
    if s is None:
        return None
    return datetime.fromisoformat(s)


class _SQLiteStore:
    """
    Shared connection handling for the SQLite repositories.

    A connection is opened per operation and committed on success; both
    repositories may point at the same database file.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        raise NotImplementedError


class SQLiteUserRepository(_SQLiteStore, UserRepository):
    """
    Durable user repository backed by SQLite. Emails are UNIQUE at the storage layer.
    """

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_USERS.table} (
                    {_USERS.id} TEXT PRIMARY KEY,
                    {_USERS.name} TEXT NOT NULL,
                    {_USERS.email} TEXT NOT NULL UNIQUE
                )
                """
            )

    def _row_to_entity(self, row: sqlite3.Row) -> User:
        return User(str(row[_USERS.id]), str(row[_USERS.name]), str(row[_USERS.email]))

    def save(self, user: User) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_USERS.table} ({_USERS.id}, {_USERS.name}, {_USERS.email})
                VALUES (?, ?, ?)
                ON CONFLICT({_USERS.id}) DO UPDATE SET
                    {_USERS.name} = excluded.{_USERS.name},
                    {_USERS.email} = excluded.{_USERS.email}
                """,
                (user.id, user.name, user.email),
            )

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_USERS.table} WHERE {_USERS.id} = ?", (user_id,)
            ).fetchone()
            return self._row_to_entity(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_USERS.table} WHERE {_USERS.email} = ?", (normalize_email(email),)
            ).fetchone()
            return self._row_to_entity(row) if row else None

    def list(self) -> List[User]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_USERS.table} ORDER BY rowid").fetchall()
            return [self._row_to_entity(r) for r in rows]


class SQLiteTodoRepository(_SQLiteStore, TodoRepository):
    """
    Durable todo repository backed by SQLite. Timestamps are stored as ISO8601 text.
    """

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_TODOS.table} (
                    {_TODOS.id} TEXT PRIMARY KEY,
                    {_TODOS.title} TEXT NOT NULL,
                    {_TODOS.description} TEXT NULL,
                    {_TODOS.owner_id} TEXT NULL,
                    {_TODOS.is_completed} INTEGER NOT NULL DEFAULT 0,
                    {_TODOS.created_at} TEXT NOT NULL,
                    {_TODOS.completed_at} TEXT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_TODOS.table}_owner_id ON {_TODOS.table}({_TODOS.owner_id})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> Todo:
        return Todo(
            str(row[_TODOS.id]),
            str(row[_TODOS.title]),
            description=row[_TODOS.description],
            owner_id=row[_TODOS.owner_id],
            is_completed=bool(row[_TODOS.is_completed]),
            created_at=_parse_dt(row[_TODOS.created_at]),
            completed_at=_parse_dt(row[_TODOS.completed_at]),
        )

    def save(self, todo: Todo) -> None:
        completed_at = todo.completed_at.isoformat() if todo.completed_at else None
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_TODOS.table} ({_TODOS.id}, {_TODOS.title}, {_TODOS.description},
                    {_TODOS.owner_id}, {_TODOS.is_completed}, {_TODOS.created_at}, {_TODOS.completed_at})
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT({_TODOS.id}) DO UPDATE SET
                    {_TODOS.title} = excluded.{_TODOS.title},
                    {_TODOS.description} = excluded.{_TODOS.description},
                    {_TODOS.owner_id} = excluded.{_TODOS.owner_id},
                    {_TODOS.is_completed} = excluded.{_TODOS.is_completed},
                    {_TODOS.created_at} = excluded.{_TODOS.created_at},
                    {_TODOS.completed_at} = excluded.{_TODOS.completed_at}
                """,
                (
                    todo.id,
                    todo.title,
                    todo.description,
                    todo.owner_id,
                    1 if todo.is_completed else 0,
                    todo.created_at.isoformat(),
                    completed_at,
                ),
            )

    def find_by_id(self, todo_id: str) -> Optional[Todo]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT * FROM {_TODOS.table} WHERE {_TODOS.id} = ?", (todo_id,)
            ).fetchone()
            return self._row_to_entity(row) if row else None

    def list_by_owner(self, owner_id: Optional[str]) -> List[Todo]:
        # IS matches NULL as well as equal values
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_TODOS.table} WHERE {_TODOS.owner_id} IS ? ORDER BY rowid",
                (owner_id,),
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def list_all(self) -> List[Todo]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_TODOS.table} ORDER BY rowid").fetchall()
            return [self._row_to_entity(r) for r in rows]
